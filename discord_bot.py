import asyncio
import logging

import discord

from newsdesk import FeedSession, Mode, NewsdeskError
from newsdesk.config import Settings, build_resolver, setup_logging

settings = Settings.from_env()
setup_logging(settings.log_level)
logger = logging.getLogger("discord_bot")

resolver = build_resolver(settings)

# One "load more" session per channel.
sessions = {}

intents = discord.Intents.default()
intents.message_content = True  # needed to read commands

client = discord.Client(intents=intents)

USAGE = "Usage: `!news <region> | <category> [| detailed|headlines] [| language]`, then `!more`"


def parse_news_command(content):
    """`!news Italy | Technology | headlines | Italiano` -> dict of session kwargs."""
    args = [a.strip() for a in content[len("!news"):].split("|")]
    args = [a for a in args if a]
    if len(args) < 2:
        return None
    parsed = {"region": args[0], "category": args[1]}
    if len(args) > 2:
        parsed["mode"] = Mode.parse(args[2])
    if len(args) > 3:
        parsed["language"] = args[3]
    return parsed


def format_points(points, header):
    response = header + "\n\n"
    for p in points:
        response += f"**{p.title}**\n"
        if p.summary:
            response += f"{p.summary}\n"
        response += f"*{p.source_name}* <{p.source_url}>\n\n"

    # Discord rejects messages over 2000 characters.
    if len(response) > 2000:
        response = response[:1997] + "..."
    return response


@client.event
async def on_ready():
    logger.info("Logged in as %s", client.user)


@client.event
async def on_message(message):
    if message.author == client.user:
        return

    if message.content.startswith("!news"):
        try:
            args = parse_news_command(message.content)
        except NewsdeskError as e:
            await message.channel.send(f"{e}\n{USAGE}")
            return
        if not args:
            await message.channel.send(USAGE)
            return

        await message.channel.send("Fetching the latest news... please wait.")
        session = FeedSession(resolver, model=settings.gemini_model, **args)
        sessions[message.channel.id] = session
        try:
            points = await asyncio.to_thread(session.first_page)
        except NewsdeskError as e:
            logger.warning("!news failed: %s", e)
            await message.channel.send(f"Could not fetch news: {e}")
            return
        await message.channel.send(format_points(points, f"📰 {session.category} in {session.region}"))

    elif message.content.startswith("!more"):
        session = sessions.get(message.channel.id)
        if session is None:
            await message.channel.send(USAGE)
            return
        if not session.has_more:
            await message.channel.send("No more news for this search.")
            return
        try:
            points = await asyncio.to_thread(session.next_page)
        except NewsdeskError as e:
            logger.warning("!more failed: %s", e)
            await message.channel.send(f"Could not fetch more news: {e}")
            return
        if not points:
            await message.channel.send("No more news for this search.")
            return
        await message.channel.send(format_points(points, f"📰 More {session.category} in {session.region}"))


if __name__ == "__main__":
    if not settings.discord_token:
        raise ValueError("DISCORD_BOT_TOKEN is not set. Check your .env file.")
    client.run(settings.discord_token)
