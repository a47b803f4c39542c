"""Print system information from a TP-Link smart plug.

Usage:
    python examples/get_sysinfo.py <device-ip>

Example:
    python examples/get_sysinfo.py 192.168.1.50
"""

import asyncio
import sys

from tplinker import (
    CommunicationError,
    DeviceError,
    GenericError,
    ProtocolError,
    SmartPlugClient,
    capture,
)


async def main(host: str) -> int:
    client = SmartPlugClient(host)
    result = await capture(client.get_sysinfo())

    match result:
        case CommunicationError():
            print(f"{host} is unreachable: {result}")
            return 1
        case ProtocolError(cause):
            print(f"{result} ({cause})")
            return 1
        case DeviceError(section):
            print(f"Device reported error {section.err_code}: {section.err_msg}")
            return 1
        case GenericError():
            print(result)
            return 1

    print(f"{'Alias':12s} {result.alias}")
    print(f"{'Model':12s} {result.model}")
    print(f"{'MAC':12s} {result.mac}")
    print(f"{'Relay':12s} {'on' if result.relay_state else 'off'}")
    print(f"{'LED':12s} {'off' if result.led_off else 'on'}")
    for index, outlet in enumerate(result.children):
        print(f"  [{index}] {outlet.alias:20s} {'on' if outlet.state else 'off'}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__.strip())
        sys.exit(1)
    sys.exit(asyncio.run(main(sys.argv[1])))
