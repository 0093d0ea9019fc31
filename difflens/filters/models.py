from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BINARY_EXTENSIONS = "png,jpg,jpeg,gif,pdf,zip,tar,gz,exe,dll,so,dmg"
DEFAULT_TEXT_EXTENSIONS = (
    "js,ts,jsx,tsx,vue,py,java,cs,cpp,c,h,php,rb,go,rs,swift,kt,dart,scala"
)
DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024


class BinaryDetection(StrEnum):
    EXTENSION = "extension"
    CONTENT = "content"
    BOTH = "both"


class ExclusionRule(BaseModel):
    model_config = ConfigDict(extra="forbid")

    exclude_deletes: bool = True
    extension_patterns: list[str] = Field(default_factory=list)
    # bytes, 0 disables the size limit
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0)
    exclude_binary_files: bool = True
    binary_detection: BinaryDetection = BinaryDetection.BOTH
    binary_extensions: str = DEFAULT_BINARY_EXTENSIONS
    text_extensions: str = DEFAULT_TEXT_EXTENSIONS
    binary_content_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
