"""Shared fixtures for building synthetic APK archives."""

import os
import struct

import pytest

LOCAL_FILE_HEADER_SIGNATURE = 0x04034B50


def build_local_entry(
    name: bytes,
    data: bytes = b"",
    flags: int = 0,
    extra: bytes = b"",
    descriptor: bytes = b"",
    declared_name_length: int | None = None,
    declared_size: int | None = None,
) -> bytes:
    """Build one local file header followed by its name, extra and data."""
    header = struct.pack(
        "<IHH10sIIHH",
        LOCAL_FILE_HEADER_SIGNATURE,
        20,
        flags,
        b"\x00" * 10,
        len(data) if declared_size is None else declared_size,
        len(data),
        len(name) if declared_name_length is None else declared_name_length,
        len(extra),
    )
    return header + name + extra + data + descriptor


@pytest.fixture
def local_entry():
    """Builder for raw local file header records."""
    return build_local_entry


@pytest.fixture
def write_apk(tmp_path):
    """Write raw archive bytes to a file and return its path."""
    def _write(content: bytes, name: str = "app.apk"):
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _write


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point config discovery at empty temp locations and clear env overrides."""
    import platformdirs
    from apk_checksum.config import ConfigLoader

    user_dir = tmp_path / "user-config"
    system_file = tmp_path / "system" / "config.toml"

    monkeypatch.setattr(platformdirs, "user_config_dir", lambda *args, **kwargs: str(user_dir))
    monkeypatch.setattr(ConfigLoader, "_system_config_path", lambda self: system_file)
    for key in list(os.environ):
        if key.startswith("APK_CHECKSUM_"):
            monkeypatch.delenv(key)

    return {"user_dir": user_dir, "system_file": system_file}


@pytest.fixture
def restore_root_logger():
    """Drop handlers installed by setup_logging() and restore the root level."""
    import logging

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    factory = logging.getLogRecordFactory()
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.setLogRecordFactory(factory)
