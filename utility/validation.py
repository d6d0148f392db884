NICKNAME_MIN_LENGTH = 1
NICKNAME_MAX_LENGTH = 32


def is_valid_nickname(nickname: str) -> bool:
    """
    Discord: "Nicknames must be between 1 and 32 characters long."
    Leading and trailing whitespace is ignored, internal whitespace counts.
    """
    # TODO: also reject the zero-width and non-rendering characters Discord filters out.
    return NICKNAME_MIN_LENGTH <= len(nickname.strip()) <= NICKNAME_MAX_LENGTH
