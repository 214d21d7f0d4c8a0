"""Interactive terminal session: python -m intake."""

import asyncio

from intake.config import get_settings
from intake.factory import configure_logging, create_conversation


async def run() -> None:
    settings = get_settings()
    configure_logging(settings)
    conversation = create_conversation(settings)

    print(conversation.messages[-1].text)
    while not conversation.is_complete:
        try:
            text = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        if not text.strip():
            continue
        result = await conversation.submit_user_turn(text)
        print(result.reply_text)


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
