import discord
from discord.ext import commands
from discord import app_commands
import logging
import logging.handlers
import os
import asyncio
from typing import Optional
from utility import config
from utility.authorization import AuthorizationGate
from utility.directory import RoleResolver
from utility.errors import RenamerError
from utility.replies import reply
from utility.role_store import RoleStore

logger = logging.getLogger("renamer")

GENERIC_ERROR = "Something went wrong while running this command. Please try again later."


class RenamerBot(commands.Bot):
    def __init__(self, store: Optional[RoleStore] = None):
        intents = discord.Intents.default()
        # Prefix owner commands (~sync, ~guild_sync).
        intents.message_content = True
        # Needed to search members by name for /rename.
        intents.members = True
        super().__init__(command_prefix=config.COMMAND_PREFIX, intents=intents)

        self.role_store = store or RoleStore(config.DB_PATH)
        self.role_resolver = RoleResolver()
        self.gate = AuthorizationGate(self.role_store, self.role_resolver)

        # Dynamic cog loading with recursive directory search
        self.initial_extensions = []
        cogs_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "cogs")
        for root, dirs, files in os.walk(cogs_dir):
            for filename in files:
                if filename.endswith('.py') and not filename.startswith('__'):
                    # Convert file path to module path
                    rel_path = os.path.relpath(os.path.join(root, filename), os.path.dirname(cogs_dir))
                    module_path = rel_path[:-3].replace(os.sep, '.')
                    self.initial_extensions.append(module_path)

    async def setup_hook(self):
        await self.role_store.open()

        for extension in self.initial_extensions:
            try:
                await self.load_extension(extension)
                logger.info("Loaded extension: %s", extension)
            except commands.ExtensionError:
                logger.exception("Failed to load extension %s", extension)

        self.tree.error(on_app_command_error)

        if config.SYNC_GUILD_ID:
            guild = discord.Object(id=config.SYNC_GUILD_ID)
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.info("Synced %d commands to guild %s", len(synced), config.SYNC_GUILD_ID)
        else:
            synced = await self.tree.sync()
            logger.info("Synced %d global commands", len(synced))

    async def close(self):
        await self.role_store.close()
        await super().close()

    async def on_ready(self):
        logger.info("Bot is online as %s", self.user.name)
        await self.change_presence(activity=discord.Game(name="/renamer help"))


async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
    if isinstance(error, app_commands.CommandOnCooldown):
        message = f"This command is on cooldown. Try again in {error.retry_after:.2f} seconds."
    elif isinstance(error, app_commands.MissingPermissions):
        message = "You don't have permission to use this command."
    elif isinstance(error, app_commands.BotMissingPermissions):
        message = "I don't have the necessary permissions to execute this command."
    elif isinstance(error, app_commands.NoPrivateMessage):
        message = "This command can only be used in a server."
    elif isinstance(error, app_commands.CommandInvokeError) and isinstance(error.original, RenamerError):
        # Storage, Discord API or member lookup failures: log the details, keep the reply generic.
        logger.error("Command %s failed: %s", interaction.command and interaction.command.qualified_name, error.original)
        message = GENERIC_ERROR
    else:
        logger.error("Unhandled error in command %s", interaction.command and interaction.command.qualified_name,
                     exc_info=error)
        message = GENERIC_ERROR

    try:
        await reply(interaction, message, ephemeral=True)
    except discord.HTTPException:
        logger.warning("Could not send error message to user for error: %s", error)


def setup_logging():
    dt_fmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("[{asctime}] [{levelname:<8}] {name}: {message}", dt_fmt, style="{")

    handler = logging.handlers.RotatingFileHandler(
        filename=config.LOG_FILE,
        encoding="utf-8",
        maxBytes=32 * 1024 * 1024,
        backupCount=5,
    )
    handler.setFormatter(formatter)
    console = logging.StreamHandler()
    console.setFormatter(formatter)

    # Our modules log under cogs.* and utility.*, the library under discord.*
    for name in ("discord", "renamer", "cogs", "utility"):
        log = logging.getLogger(name)
        log.setLevel(config.LOG_LEVEL)
        log.addHandler(handler)
        log.addHandler(console)


def create_bot() -> RenamerBot:
    bot = RenamerBot()

    @bot.command()
    @commands.is_owner()
    async def sync(ctx):
        """Sync the application commands with Discord."""
        await ctx.send("Syncing commands...")
        synced = await bot.tree.sync()
        await ctx.send(f"Synced {len(synced)} commands: {', '.join(cmd.name for cmd in synced)}")

    @bot.command()
    @commands.is_owner()
    async def guild_sync(ctx):
        """Sync commands to this guild only (faster for testing)."""
        await ctx.send("Syncing commands to this guild...")
        bot.tree.copy_global_to(guild=ctx.guild)
        synced = await bot.tree.sync(guild=ctx.guild)
        await ctx.send(f"Synced {len(synced)} commands to this guild!")

    return bot


async def run(bot: RenamerBot, token: str):
    async with bot:
        await bot.start(token)


def main():
    setup_logging()
    token = config.get_token()
    bot = create_bot()
    asyncio.run(run(bot, token))


if __name__ == "__main__":
    main()
