"""adb device tools - enumerate devices and capture bugreports."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from bugreport_mcp.adapters.adb import AdbRunner
from bugreport_mcp.errors import FilesystemFailure
from bugreport_mcp.tools.base import ToolHandler, ToolResult
from bugreport_mcp.tools.files import SavedFile, sanitize_file_name
from bugreport_mcp.validation.config import ServerConfig

logger = logging.getLogger(__name__)

DEVICES_HEADER = "List of devices"


class DeviceRecord(BaseModel):
    """One line of ``adb devices -l``."""

    serial: str
    state: str
    model: str = ""
    device: str = ""


class DeviceList(BaseModel):
    devices: List[DeviceRecord]
    count: int


class ListDevicesInput(BaseModel):
    model_config = ConfigDict(extra="forbid")


class GetBugreportInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # No control characters: the serial ends up in a file name and an argv entry
    serial: StrictStr = Field(
        min_length=1,
        pattern=r"^[^\x00-\x1f\x7f]+$",
        description="adb serial of the device (from adb devices)",
    )


def parse_devices(output: str) -> List[DeviceRecord]:
    """
    Parse ``adb devices -l`` output.

    Each non-empty line other than the header is ``<serial> <state>``
    followed by ``key:value`` tokens. Only ``model:`` and ``device:`` are
    read; other keys (``usb:``, ``product:``, ``transport_id:``) are ignored.
    """
    devices: List[DeviceRecord] = []
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(DEVICES_HEADER):
            continue

        parts = line.split()
        serial = parts[0]
        state = parts[1] if len(parts) > 1 else ""

        model = ""
        device = ""
        for part in parts[2:]:
            if part.startswith("model:"):
                model = part[len("model:"):]
            if part.startswith("device:"):
                device = part[len("device:"):]

        devices.append(DeviceRecord(serial=serial, state=state, model=model, device=device))
    return devices


def bugreport_file_name(serial: str, now: Optional[datetime] = None) -> str:
    """``bugreport-<serial>-<timestamp>.txt`` with a filesystem-safe timestamp."""
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    stamp = f"{stamp}.{now.microsecond // 1000:03d}Z".replace(":", "-").replace(".", "-")
    return sanitize_file_name(f"bugreport-{serial}-{stamp}.txt")


class ListDevicesTool(ToolHandler):
    name = "adb.list_devices"
    description = "List adb devices with serial, state, model and device name"
    failure_prefix = "Failed to list adb devices"
    input_model = ListDevicesInput
    output_model = DeviceList

    def __init__(self, runner: AdbRunner):
        self._runner = runner

    def handle(self, params: Any) -> ToolResult:
        result = self._runner.run(["devices", "-l"])
        devices = parse_devices(result.stdout)

        return ToolResult.success(
            f"Found {len(devices)} adb device(s)",
            DeviceList(devices=devices, count=len(devices)),
        )


class GetBugreportTool(ToolHandler):
    name = "adb.get_bugreport"
    description = "Capture a bugreport from the specified adb device"
    failure_prefix = "Failed to capture bugreport"
    input_model = GetBugreportInput
    output_model = SavedFile

    def __init__(self, config: ServerConfig, runner: AdbRunner):
        self._config = config
        self._runner = runner

    def handle(self, params: Any) -> ToolResult:
        bugreports_dir = self._config.bugreports_path()
        try:
            bugreports_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemFailure(str(exc)) from exc

        full_path = bugreports_dir / bugreport_file_name(params.serial)
        self._runner.run_to_file(["-s", params.serial, "bugreport"], full_path)

        logger.info("Saved bugreport to: %s", full_path)
        return ToolResult.success(
            f"Bugreport saved to {full_path}",
            SavedFile(file_path=str(full_path)),
        )
