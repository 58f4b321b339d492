"""
Compiler settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use the ZLANG_ prefix (e.g., ZLANG_STRICT_MODE=false).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Compiler configuration via environment variables.

    Environment variables use ZLANG_ prefix.

    Examples:
        ZLANG_ENTRY_UNIT=app.z
        ZLANG_STRICT_MODE=false
        ZLANG_MACRO_MAX_PASSES=20
    """

    model_config = SettingsConfigDict(
        env_prefix="ZLANG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Source configuration
    entry_unit: str = Field(
        default="main.z",
        description="Name of the unit compilation starts from",
    )

    unit_extension: str = Field(
        default=".z",
        description="File extension of Z source units",
    )

    # Compilation configuration
    strict_mode: bool = Field(
        default=True,
        description="Strict mode: unrecognized lines are fatal instead of emitted as comments",
    )

    macro_max_passes: int = Field(
        default=100,
        ge=1,
        description="Maximum number of macro expansion passes before giving up",
    )

    macro_max_lines: int = Field(
        default=100_000,
        ge=1,
        description="Maximum size of the line stream during macro expansion",
    )

    declaration_keyword: str = Field(
        default="let",
        description="Keyword used for variable bindings in generated code",
    )

    # Output configuration
    wrap_output: bool = Field(
        default=True,
        description="Wrap the compiled program in an immediately-invoked function",
    )

    output_filename: str = Field(
        default="zlang_output.js",
        description="Name of the compiled artifact written by the CLI",
    )

    def unitName_candidates(self, name: str) -> List[str]:
        """
        List the file-set keys an import of ``name`` may resolve to.

        The exact name is tried first, then the name without the unit
        extension, then with the extension appended.

        Args:
            name: Unit name as written in an import directive

        Returns:
            Candidate keys in lookup order, without duplicates

        Example:
            >>> settings = AppSettings()
            >>> settings.unitName_candidates('lib.z')
            ['lib.z', 'lib']
            >>> settings.unitName_candidates('lib')
            ['lib', 'lib.z']
        """
        candidates = [name]
        if name.endswith(self.unit_extension):
            candidates.append(name[: -len(self.unit_extension)])
        else:
            candidates.append(name + self.unit_extension)
        return [c for i, c in enumerate(candidates) if c and c not in candidates[:i]]

    def unitName_isSource(self, filename: str) -> bool:
        """Check if a filename carries the Z unit extension"""
        return filename.endswith(self.unit_extension)


# Singleton instance - import this in your code
appsettings = AppSettings()
