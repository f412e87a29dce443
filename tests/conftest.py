from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_SRC = (_PROJECT_ROOT / "src").resolve()
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

# Load .env from project root so local PLAYERBUILD_* overrides are active
load_dotenv(_PROJECT_ROOT / ".env", override=False)

# Resolve relative PLAYERBUILD_LOG_DIR against project root
_log_dir = os.environ.get("PLAYERBUILD_LOG_DIR", "")
if _log_dir and not os.path.isabs(_log_dir):
    os.environ["PLAYERBUILD_LOG_DIR"] = str((_PROJECT_ROOT / _log_dir).resolve())


@pytest.fixture
def settings():
    from playerbuild.settings import MemorySettingsStore, StrippingLevel

    return MemorySettingsStore(stripping_level=StrippingLevel.STRIP_BYTECODE)
