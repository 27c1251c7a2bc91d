"""Community shuttle booking service."""
