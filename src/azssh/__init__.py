"""azssh - Entra ID SSH login for Azure Linux VMs

Philosophy:
- Ruthless simplicity
- Delegate credentials to az CLI (short-lived certificates only)
- Fail fast with helpful guidance

azssh checks the local toolchain, mints a fresh SSH certificate and config
through the az ssh extension, then hands the terminal to an SSH client.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
