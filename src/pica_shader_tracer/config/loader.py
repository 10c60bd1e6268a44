import yaml
from typing import Dict, Any
from .models import TracerConfig, DumpConfig, ListingConfig, MIN_OFFSET_DIGITS, MAX_OFFSET_DIGITS

class ConfigLoader:
    def load_from_file(self, path: str) -> TracerConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> TracerConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> TracerConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

        defaults_dump = DumpConfig()
        dump_data = data.get("dump", {}) or {}
        if not isinstance(dump_data, dict):
            raise ValueError(f"dump section must be a mapping, got {type(dump_data).__name__}")
        dump = DumpConfig(
            enabled=self._parse_bool(dump_data.get("enabled", defaults_dump.enabled)),
            directory=str(dump_data.get("directory", defaults_dump.directory)),
            shader_prefix=str(dump_data.get("shader_prefix", defaults_dump.shader_prefix)),
            geometry_prefix=str(dump_data.get("geometry_prefix", defaults_dump.geometry_prefix)),
        )

        defaults_listing = ListingConfig()
        listing_data = data.get("listing", {}) or {}
        if not isinstance(listing_data, dict):
            raise ValueError(f"listing section must be a mapping, got {type(listing_data).__name__}")
        offset_digits = self._parse_int(listing_data.get("offset_digits", defaults_listing.offset_digits))
        if not MIN_OFFSET_DIGITS <= offset_digits <= MAX_OFFSET_DIGITS:
            raise ValueError(
                f"offset_digits must be between {MIN_OFFSET_DIGITS} and {MAX_OFFSET_DIGITS}: {offset_digits}"
            )
        entry_label = listing_data.get("entry_label", defaults_listing.entry_label)
        if not isinstance(entry_label, str) or not entry_label:
            raise ValueError(f"Invalid entry label: {entry_label}")

        return TracerConfig(
            dump=dump,
            listing=ListingConfig(offset_digits=offset_digits, entry_label=entry_label),
        )

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

    def _parse_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        raise ValueError(f"Invalid boolean format: {value}")
