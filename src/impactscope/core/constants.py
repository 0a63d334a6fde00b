"""Constants and default values for impactscope."""

from pathlib import Path

# Global config
GLOBAL_CONFIG_DIR = Path.home() / ".impactscope"
GLOBAL_CONFIG_FILE = GLOBAL_CONFIG_DIR / "config.yaml"

# LLM defaults
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "qwen2.5-coder:7b"
DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"
DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_TOKENS = 4000

# Pipeline defaults
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_ORACLE_TIMEOUT_SECONDS = 120.0

# Report markers
NO_CHANGE_MEMBER = "No Structural Changes Detected"
FAILED_SUFFIX = " (Failed)"

# Source discovery
JAVA_EXTENSION = ".java"
JAVA_SOURCE_ROOTS = [
    "src/main/java",
    "src/test/java",
    "src",
]

DEFAULT_EXCLUDE_PATTERNS = [
    ".git/",
    "target/",
    "build/",
    "out/",
    ".idea/",
    ".gradle/",
    "node_modules/",
]

MAX_FILE_SIZE_KB = 1024

# Context bundle limits
MAX_CONTEXT_CHARS = 24000
REASONING_SUMMARY_CHARS = 400
