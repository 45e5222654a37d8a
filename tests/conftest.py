import functools
import json
import sys
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Iterator

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from skz.constants import TEST_REGISTRY_ENV  # noqa: E402


REGISTRY_PAYLOAD: dict[str, Any] = {
    "name": "test-registry",
    "version": "2.0.0",
    "utils": ["utils", "linear"],
    "skills": [
        {
            "name": "linear-issues-read",
            "description": "Read Linear issues",
            "version": "1.0.0",
            "domain": "linear",
            "utils": ["utils", "linear"],
            "dependencies": {"@linear/sdk": "^1.0.0"},
            "files": {
                "skill": ["SKILL.md"],
                "entry": {"list-issues": "src/linear/list-issues.ts"},
            },
        },
        {
            "name": "linear-issues-write",
            "description": "Create and update Linear issues",
            "version": "1.0.0",
            "domain": "linear",
            "requires": ["linear-issues-read"],
            "utils": ["utils", "linear"],
            "files": {
                "skill": ["SKILL.md"],
                "entry": {"create-issue": "src/linear/create-issue.ts"},
                "commands": {"triage": ["triage.md"]},
            },
        },
        {
            "name": "tmux",
            "description": "Drive tmux sessions",
            "version": "1.2.0",
            "domain": "terminal",
            "utils": ["utils"],
            "files": {
                "skill": ["SKILL.md"],
                "entry": {"list-sessions": "src/tmux/list-sessions.ts"},
                "agents": ["tmux-helper.md"],
                "static": ["reference.md"],
            },
            "setup": {
                "env": ["TMUX_SOCKET"],
                "instructions": "Start a tmux server first.",
                "prompts": [
                    {
                        "name": "shell",
                        "type": "select",
                        "message": "Default shell",
                        "choices": ["bash", "zsh"],
                        "default": "zsh",
                    }
                ],
                "configFile": "config.yaml",
            },
        },
        {
            "name": "notes",
            "description": "Scratch notes",
            "version": "0.1.0",
            "files": {"skill": ["SKILL.md"]},
        },
    ],
    "agents": [
        {
            "name": "triager",
            "description": "Triage Linear issues",
            "version": "1.0.0",
            "files": ["agent.md"],
            "mcp": {"linear": {"type": "remote", "url": "https://mcp.linear.app/sse"}},
            "skills": ["linear-issues-write"],
        }
    ],
}

REGISTRY_FILES: dict[str, str] = {
    "skills/linear-issues-read/SKILL.md": (
        "---\nname: linear-issues-read\ndescription: Read Linear issues\n"
        "version: 1.0.0\nallowed-tools: Bash(bun *)\n---\n\nSee AGENTS.md.\n"
    ),
    "skills/linear-issues-write/SKILL.md": (
        "---\nname: linear-issues-write\ndescription: Write Linear issues\n---\n\nWrites.\n"
    ),
    "skills/linear-issues-write/command/triage/triage.md": (
        "---\ndescription: Triage\nallowed-tools: Bash(bun *)\nagent: triager\n---\n"
        "Triage issues per AGENTS.md\n"
    ),
    "skills/tmux/SKILL.md": "---\nname: tmux\ndescription: Drive tmux\n---\n\nTmux.\n",
    "skills/tmux/agent/tmux-helper.md": "---\ndescription: helper\nagent: build\n---\nRead AGENTS.md\n",
    "skills/tmux/reference.md": "# Reference\n",
    "skills/notes/SKILL.md": "---\nname: notes\n---\n\nNotes.\n",
    "src/linear/list-issues.ts": 'import { client } from "../../utils/linear";\nexport const list = 1;\n',
    "src/linear/create-issue.ts": 'import { client } from "../../utils/linear";\nexport const create = 1;\n',
    "src/tmux/list-sessions.ts": 'import { run } from "../../utils/utils";\nexport const sessions = 1;\n',
    "utils/utils.ts": "export const run = () => 0;\n",
    "utils/linear.ts": "export const client = {};\n",
    "agents/triager/agent.md": (
        "---\ndescription: Triage agent\nmode: subagent\n---\nYou triage issues. See AGENTS.md.\n"
    ),
}


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    monkeypatch.delenv(TEST_REGISTRY_ENV, raising=False)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def registry_root(tmp_path: Path, write_json) -> Path:
    root = tmp_path / "registry"
    write_json(root / "registry.json", REGISTRY_PAYLOAD)
    for relative, content in REGISTRY_FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


class _QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        pass


@pytest.fixture
def registry_url(registry_root: Path, monkeypatch) -> Iterator[str]:
    handler = functools.partial(_QuietHandler, directory=str(registry_root))
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    url = f"http://127.0.0.1:{server.server_address[1]}"
    monkeypatch.setenv(TEST_REGISTRY_ENV, url)
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")
    try:
        yield url
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()


class StubSource:
    """In-memory registry source keyed by path."""

    def __init__(self, url: str, files: dict[str, str]) -> None:
        self.url = url
        self.files = files
        self.requested: list[str] = []

    def fetch(self, path: str) -> str:
        from skz.errors import RegistryFileNotFoundError

        self.requested.append(path)
        if path not in self.files:
            raise RegistryFileNotFoundError(self.url, path)
        return self.files[path]


@pytest.fixture
def stub_client():
    from skz.registry.client import RegistryClient

    def _build(files: dict[str, str]) -> tuple[RegistryClient, dict[str, StubSource]]:
        sources: dict[str, StubSource] = {}

        def factory(url: str) -> StubSource:
            sources[url] = StubSource(url, files)
            return sources[url]

        return RegistryClient(source_factory=factory), sources

    return _build


@pytest.fixture
def registry_files() -> dict[str, str]:
    return {"registry.json": json.dumps(REGISTRY_PAYLOAD), **REGISTRY_FILES}


@pytest.fixture
def stub_registry(stub_client, registry_files):
    """A client over the in-memory registry plus the parsed skills by name."""
    url = "https://registry.example.com"
    client, _ = stub_client(registry_files)
    registry = client.fetch_registry(url)
    return client, {skill.name: skill for skill in registry.skills}, registry


class ScriptedPrompter:
    """Answers prompts from queues and records every question asked."""

    assume_yes = False

    def __init__(self, confirms=(), choices=(), texts=(), many=()) -> None:
        self.confirms = list(confirms)
        self.choices = list(choices)
        self.texts = list(texts)
        self.many = list(many)
        self.asked: list[str] = []

    def confirm(self, message: str, default: bool = False) -> bool:
        self.asked.append(message)
        return self.confirms.pop(0) if self.confirms else default

    def choose(self, message, choices, default=None):
        self.asked.append(message)
        return self.choices.pop(0) if self.choices else (default or choices[0])

    def text(self, message, default=None):
        self.asked.append(message)
        return self.texts.pop(0) if self.texts else (default or "")

    def choose_many(self, message, choices, defaults):
        self.asked.append(message)
        return self.many.pop(0) if self.many else list(defaults)


@pytest.fixture
def scripted_prompter():
    return ScriptedPrompter
