from __future__ import annotations

import logging
import subprocess
from typing import Dict, List, Optional

from config import load_config
from utils.errors import TokenizationError

logger = logging.getLogger(__name__)

# Juman++ writes an escaped space as its own morpheme.
ESCAPED_SPACE = "\\␣"
MIN_FIELDS = 12


def parse_jumanpp_output(output: str) -> List[str]:
    """Return the dictionary form of every morpheme in Juman++ output.

    Each morpheme line has at least 12 space separated fields (the last may
    be a quoted string containing spaces); the third is the dictionary form.
    Lines starting with ``@`` are alternative analyses of the previous
    morpheme and are skipped. Output without an ``EOS`` line is malformed.
    """
    words: List[str] = []
    saw_eos = False
    for line in output.splitlines():
        if not line:
            continue
        if line == "EOS":
            saw_eos = True
            continue
        if line.startswith("@"):
            continue
        parts = line.split(" ")
        if len(parts) < MIN_FIELDS:
            raise TokenizationError(f"Malformed jumanpp line: {line!r}")
        dictionary_form = parts[2]
        if dictionary_form == ESCAPED_SPACE:
            continue
        words.append(dictionary_form)
    if not saw_eos:
        raise TokenizationError("jumanpp output ended without EOS")
    return words


class JumanppTokenizer:
    """Tokenizer adapter that pipes text through the ``jumanpp`` binary.

    Returns tokens in sentence order, repeats included; callers decide how to
    count repeats.
    """

    def __init__(self, command: str = "jumanpp", timeout: float = 10):
        self.command = command
        self.timeout = timeout

    def tokenize(self, text: str) -> List[str]:
        # Juman++ analyses one sentence per line.
        line = " ".join(text.splitlines()) + "\n"
        try:
            result = subprocess.run(
                [self.command],
                input=line.encode("utf-8"),
                capture_output=True,
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as e:
            logger.error("jumanpp not found: %s", e)
            raise TokenizationError(f"Tokenizer command {self.command!r} not found") from e
        except subprocess.TimeoutExpired as e:
            logger.error("jumanpp timed out after %ss", self.timeout)
            raise TokenizationError(f"Tokenizer timed out after {self.timeout}s") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            logger.error("jumanpp exited with %s: %s", e.returncode, stderr)
            raise TokenizationError(f"Tokenizer exited with status {e.returncode}") from e
        try:
            output = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TokenizationError("Tokenizer output is not valid UTF-8") from e
        return parse_jumanpp_output(output)


def get_tokenizer(config: Optional[Dict] = None) -> JumanppTokenizer:
    """Build the tokenizer described by ``config``, loading it when not given."""
    if not config:
        config = load_config()
    tokenizer_cfg = config.get("tokenizer", {})
    return JumanppTokenizer(
        command=tokenizer_cfg.get("command", "jumanpp"),
        timeout=tokenizer_cfg.get("timeout", 10),
    )


def get_request_tokenizer() -> JumanppTokenizer:
    """FastAPI dependency: the configured tokenizer, reloaded per request."""
    return get_tokenizer()
