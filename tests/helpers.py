"""Shared test helpers: session log builders."""

import json
import os
from pathlib import Path


def claude_line(msg_type: str, input_tokens: int = 0, output_tokens: int = 0,
                cache_read: int = 0, cache_creation: int = 0) -> str:
    """A Claude Code JSONL record. Usage is only attached to assistant messages."""
    record = {
        "type": msg_type,
        "uuid": f"{msg_type}-{input_tokens}-{output_tokens}",
        "message": {"role": msg_type, "content": "hello"},
    }
    if msg_type == "assistant":
        record["message"]["usage"] = {
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "cache_read_input_tokens": cache_read,
            "cache_creation_input_tokens": cache_creation,
        }
    return json.dumps(record)


def codex_message(role: str) -> str:
    return json.dumps({
        "type": "response_item",
        "payload": {"type": "message", "role": role, "content": [{"type": "input_text", "text": "hi"}]},
    })


def codex_token_count(input_tokens: int, output_tokens: int,
                      reasoning: int = 0, cached: int = 0) -> str:
    return json.dumps({
        "type": "event_msg",
        "payload": {
            "type": "token_count",
            "info": {
                "total_token_usage": {
                    "input_tokens": input_tokens,
                    "cached_input_tokens": cached,
                    "output_tokens": output_tokens,
                    "reasoning_output_tokens": reasoning,
                },
            },
        },
    })


def write_session(path: Path, lines: list[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")
    return path


def write_claude_session(root: Path, project: str, session_id: str, lines: list[str]) -> Path:
    return write_session(root / project / f"{session_id}.jsonl", lines)


def write_codex_session(root: Path, day: str, session_id: str, lines: list[str]) -> Path:
    """``day`` is ``yyyy/mm/dd``."""
    return write_session(root / day / f"{session_id}.jsonl", lines)


def bump_mtime(path: Path, seconds: float = 10.0):
    """Advance a file's mtime without touching its content."""
    st = path.stat()
    bumped = st.st_mtime_ns + int(seconds * 1_000_000_000)
    os.utime(path, ns=(st.st_atime_ns, bumped))


def wait_for_worker(manager, timeout_ms: int = 10000):
    """Wait for any background stats run to finish and deliver its signals."""
    assert manager.wait_for_idle(timeout_ms)
