"""High-level async client for TP-Link smart plugs and power strips."""

import logging
from typing import Any

from ._protocol import check_sections, decode_response, encode_command
from ._transport import DEFAULT_PORT, DEFAULT_TIMEOUT, send_request
from .exceptions import GenericError
from .models import SysInfo

logger = logging.getLogger(__name__)


class SmartPlugClient:
    """Async client for a TP-Link smart plug speaking the local TCP protocol."""

    def __init__(
        self,
        host: str,
        *,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialise the client.

        Args:
            host: Device IP address or hostname (e.g. "192.168.1.50").
            port: TCP port of the device's local API.
            timeout: Seconds allowed for one request/response exchange.
        """
        self._host = host
        self._port = port
        self._timeout = timeout

    @property
    def host(self) -> str:
        return self._host

    async def send_command(self, command: dict[str, Any]) -> dict[str, Any]:
        """Send a raw JSON command and return the decoded response.

        Raises CommunicationError, ProtocolError or DeviceError on failure.
        """
        logger.debug(f"Sending command to {self._host}: {command}")
        raw = await send_request(
            self._host,
            encode_command(command),
            port=self._port,
            timeout=self._timeout,
        )
        response = check_sections(decode_response(raw))
        logger.debug(f"Response from {self._host}: {response}")
        return response

    async def get_sysinfo(self) -> SysInfo:
        """Fetch the device's system information."""
        response = await self.send_command({"system": {"get_sysinfo": {}}})
        return SysInfo.from_response(response)

    async def set_relay_state(self, on: bool, *, outlet: int | None = None) -> None:
        """Switch the plug, or one outlet of a power strip, on or off.

        Args:
            on: Desired relay state.
            outlet: Zero-based outlet index on a multi-outlet strip. When
                omitted the whole device is switched.
        """
        command: dict[str, Any] = {
            "system": {"set_relay_state": {"state": int(on)}}
        }
        if outlet is not None:
            command["context"] = {"child_ids": [await self._child_id(outlet)]}
        await self.send_command(command)

    async def set_led(self, on: bool) -> None:
        """Turn the status LED on or off."""
        await self.send_command({"system": {"set_led_off": {"off": int(not on)}}})

    async def set_alias(self, alias: str) -> None:
        """Rename the device."""
        if not alias:
            raise GenericError("device alias must not be empty")
        await self.send_command({"system": {"set_dev_alias": {"alias": alias}}})

    async def reboot(self, delay: int = 1) -> None:
        """Reboot the device after ``delay`` seconds."""
        if delay < 0:
            raise GenericError("reboot delay must not be negative")
        await self.send_command({"system": {"reboot": {"delay": delay}}})

    async def _child_id(self, outlet: int) -> str:
        sysinfo = await self.get_sysinfo()
        if not 0 <= outlet < len(sysinfo.children):
            raise GenericError("device plug index out of range")
        child_id = sysinfo.children[outlet].id
        # Some firmware reports only the two-digit outlet suffix.
        if len(child_id) == 2:
            child_id = sysinfo.device_id + child_id
        return child_id
