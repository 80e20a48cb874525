"""Example: reset the energy counter of a Peacefair PZEM meter using tpzem."""

import asyncio

from tpzem import PeacefairProvider, ProviderSettings, send_reset
from tpzem.config import setup_logging


async def example_reset_meter() -> None:
    """Reset a meter, first with the shortcut, then through the provider."""
    setup_logging("DEBUG")

    # Replace with the serial port and address of your meter
    port = "/dev/ttyUSB0"
    address = 1

    # The send_reset function opens the port, sends the command and closes the port again
    if await send_reset(port, address=address):
        print(f"Energy counter of meter {address} on {port} was reset")
    else:
        print(f"Meter {address} on {port} did not acknowledge the reset")

    # Alternatively, settings can be read from TPZEM_* environment variables
    # and the command selected by its identifier, as a provider framework would do
    provider = PeacefairProvider(ProviderSettings())
    for command in provider.available_commands():
        for option in command.options:
            print(f"{command.provider}: {command.label} -> {option.value} ({option.text})")

    success = await provider.send_command("66")
    print("Reset acknowledged" if success else "Reset failed")


if __name__ == "__main__":
    asyncio.run(example_reset_meter())
