import io

from ludwig.help import MORE_PROMPT, TOPIC_PROMPT, run_help
from ludwig.helpfile import HelpFile

CONTENTS = b"Index A B\n"
BODY = b"alpha one\n\\%\nalpha two\nbeta\n"
DATA = b"2 1\nA 0 23\nB 23 28\n" + CONTENTS + BODY


class _Session:
    def __init__(self, replies):
        self.replies = iter(replies)
        self.prompts = []
        self.lines = []

    def write(self, text):
        self.lines.append(text)

    def ask(self, prompt):
        self.prompts.append(prompt)
        return next(self.replies)


def _run(selection, replies, helpfile=True):
    session = _Session(replies)
    hf = HelpFile(io.BytesIO(DATA)) if helpfile else None
    run_help(hf, selection, session.write, session.ask)
    return session


def test_continue_through_page_break():
    s = _run("A", [" ", ""])
    assert s.lines == ["alpha one", "alpha two"]
    assert s.prompts == [MORE_PROMPT, TOPIC_PROMPT]


def test_stop_at_page_break():
    s = _run("A", ["", ""])
    assert s.lines == ["alpha one"]
    assert s.prompts == [MORE_PROMPT, TOPIC_PROMPT]


def test_jump_to_topic_at_page_break():
    s = _run("A", ["b", ""])
    assert s.lines == ["alpha one", "beta"]


def test_unknown_topic():
    s = _run("Q", [""])
    assert s.lines == ["Can't find Command or Section in HELP"]
    assert s.prompts == [TOPIC_PROMPT]


def test_no_helpfile():
    s = _run("A", [], helpfile=False)
    assert s.lines == ["Can't open HELP file"]
    assert s.prompts == []


def test_empty_selection_shows_contents():
    s = _run("", [""])
    assert s.lines == ["Index A B"]


def test_space_at_topic_prompt_returns_to_contents():
    s = _run("B", [" ", ""])
    assert s.lines == ["beta", "Index A B"]


def test_topic_reply_is_uppercased_and_trimmed():
    s = _run("", ["b  ", ""])
    assert s.lines == ["Index A B", "beta"]