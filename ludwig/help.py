"""The interactive help browser."""

from __future__ import annotations

from typing import Callable, Optional

from ludwig.helpfile import CONTENTS_KEY, HelpFile

PAGE_BREAK = "\\%"
MORE_PROMPT = "<space> for more, <return> to exit : "
TOPIC_PROMPT = "Command or Section or <return> to exit : "


def _normalise(reply: str) -> str:
    if reply.strip():
        reply = reply.rstrip()
    return reply.upper()


def run_help(helpfile: Optional[HelpFile], selection: str,
             write: Callable[[str], None], ask: Callable[[str], str]) -> None:
    """Show help entries, starting at ``selection`` or the contents page.

    ``write`` shows one line of text; ``ask`` shows a prompt and returns the
    user's reply.  An empty reply to the topic prompt ends the session.
    """
    if helpfile is None:
        write("Can't open HELP file")
        return

    topic = selection or CONTENTS_KEY
    while topic:
        record = helpfile.read(topic)
        going = record is not None
        if not going:
            write("Can't find Command or Section in HELP")
            topic = ""

        while going:
            if record.txt.startswith(PAGE_BREAK):
                reply = _normalise(ask(MORE_PROMPT))
                if not reply or reply[0] != " ":
                    going = False
                    topic = reply
            else:
                write(record.txt)

            if going:
                record = helpfile.next()
                going = record is not None and record.key == topic
                if not going:
                    topic = ""

        if not topic or topic[0] == " ":
            topic = _normalise(ask(TOPIC_PROMPT))
            if topic and topic[0] == " ":
                topic = CONTENTS_KEY