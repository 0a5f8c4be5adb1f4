from enum import Enum, unique

@unique
class OutputFormat(str, Enum):
    """Formats the converter is allowed to produce."""
    MP3 = "mp3"
    WAV = "wav"
    AAC = "aac"
    M4A = "m4a"

@unique
class ProgressPhase(str, Enum):
    IDLE = "idle"
    CONVERTING = "converting"
    COMPLETED = "completed"
    ERROR = "error"

@unique
class ConversionState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    BUILDING = "building"
    CONVERTING = "converting"
    COMPLETED = "completed"
    FAILED = "failed"

@unique
class FailureKind(str, Enum):
    INPUT_NOT_FOUND = "input_not_found"
    STAGING_FAILED = "staging_failed"
    ENGINE_INVOCATION_FAILED = "engine_invocation_failed"
