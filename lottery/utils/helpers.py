import os
import re
from typing import Optional, List

WS_PATTERN = r'[ \t\r\n\u000C]'
ID_PATTERN = r'[a-zA-Z\$_][a-zA-Z0-9\$_]*'


def save_to_file(output_directory: Optional[str], filename: str, code: str):
    if output_directory is not None:
        target = os.path.join(output_directory, filename)
    else:
        target = filename
    with open(target, "w") as f:
        f.write(code)
    return target


def read_file(filename: str):
    with open(filename, 'r') as f:
        return f.read()


def get_contract_names(sol_filename: str) -> List[str]:
    with open(sol_filename) as f:
        s = f.read()
        matches = re.finditer(f'contract{WS_PATTERN}+({ID_PATTERN}){WS_PATTERN}*{{', s)
        return [m.group(1) for m in matches]


def get_code_error_msg(line: int, column: int, code: List[str]) -> str:
    """Format a source location as the offending line followed by a marker pointing at column (both 1-based)."""
    if not 1 <= line <= len(code):
        raise ValueError(f'Line {line} is outside of the code (1-{len(code)})')
    affected_line = code[line - 1].replace('\t', ' ' * 4)
    return f'At line: {line};{column}\n{affected_line}\n{"-" * (column - 1)}/'
