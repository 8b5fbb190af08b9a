"""
Shared fixtures.
"""

import stat
import sys
import textwrap
from pathlib import Path

import pytest

from ffmpeg_executor.config import PerformanceConfig
from ffmpeg_executor.config import manager as config_manager_module

FAKE_FFMPEG = textwrap.dedent(
    """\
    #!{python}
    # Stand-in for ffmpeg: echoes its argv, then sleeps/exits as instructed.
    import sys
    import time

    args = sys.argv[1:]


    def value(flag, default=None):
        if flag in args:
            return args[args.index(flag) + 1]
        return default


    print("argv: " + " ".join(args), flush=True)
    sys.stderr.write("Duration: 00:01:05.20, start: 0.000000, bitrate: 900 kb/s\\n")
    sys.stderr.flush()
    if value("--fail-message"):
        sys.stderr.write(value("--fail-message") + "\\n")
        sys.stderr.flush()
    time.sleep(float(value("--sleep", "0")))
    sys.exit(int(value("--exit", "0")))
    """
)



@pytest.fixture
def fake_ffmpeg(tmp_path: Path) -> Path:
    """Executable script behaving like a tiny ffmpeg."""
    script = tmp_path / "fake-ffmpeg"
    script.write_text(FAKE_FFMPEG.format(python=sys.executable))
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def performance() -> PerformanceConfig:
    """Performance settings with a short timeout."""
    return PerformanceConfig(
        max_concurrent_tasks=2,
        threads=2,
        low_memory_mode=True,
        timeout_seconds=1,
        max_resolution_width=1280,
        max_resolution_height=720,
    )


@pytest.fixture(autouse=True)
def reset_config_manager(monkeypatch, tmp_path):
    """Isolate the global config manager and default config locations."""
    monkeypatch.setattr(config_manager_module, "_config_manager", None)
    monkeypatch.setattr(
        config_manager_module.ConfigManager,
        "DEFAULT_CONFIG_LOCATIONS",
        [tmp_path / "home" / ".ffmpeg-executor.yaml"],
    )
    monkeypatch.delenv(config_manager_module.CONFIG_ENV_VAR, raising=False)
