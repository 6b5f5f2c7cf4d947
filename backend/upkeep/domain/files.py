# backend/upkeep/domain/files.py
"""Doküman klasöründe dosyalar '<MachineID>_<orijinal ad>' biçiminde tutulur."""


def file_extension(filename: str) -> str:
    parts = filename.split(".")
    return parts[-1] if len(parts) > 1 else ""


def add_machine_prefix(machine_id: int, filename: str) -> str:
    return f"{machine_id}_{filename}"


def strip_machine_prefix(filename: str) -> str:
    return "_".join(filename.split("_")[1:])


def has_machine_prefix(machine_id: int, filename: str) -> bool:
    return filename.startswith(f"{machine_id}_")
