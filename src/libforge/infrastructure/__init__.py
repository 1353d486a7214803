"""Infrastructure layer: filesystem, subprocess, and network adapters."""
