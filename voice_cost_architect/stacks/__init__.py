from .compatibility import BLOCK_RULES, SupportCheck, check_support
from .loader import StackFile, load_stack_file, parse_stack_document
from .model import StackConfig, StackIdGenerator, new_stack
from .presets import default_stacks
from .validation import StackIssue, validate_stack

__all__ = [
    "BLOCK_RULES",
    "SupportCheck",
    "check_support",
    "StackFile",
    "load_stack_file",
    "parse_stack_document",
    "StackConfig",
    "StackIdGenerator",
    "new_stack",
    "default_stacks",
    "StackIssue",
    "validate_stack",
]
