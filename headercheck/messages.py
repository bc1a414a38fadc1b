from typing import TextIO
import sys

from termcolor import colored

###############################################################################
# Output prefixes
###############################################################################

CHECKMARK    = '[' + colored("✓", "green") + ']'
CROSSMARK    = '[' + colored("✗", "red") + ']'
QUESTIONMARK = '[' + colored("?", "yellow") + ']'
INFOMARK     = '[' + colored("i", "blue") + ']'

RAW_PREFIX_WIDTH = len('[✓]')

def _message(prefix: str, stream: TextIO, *args):
    msg = '\n'.join(str(arg) for arg in args)
    first = True
    for line in msg.split('\n'):
        if first: print(f"{prefix} {line}", file=stream)
        else:     print(f"{' ' * RAW_PREFIX_WIDTH} {line}", file=stream)
        first = False

# Errors and warnings go to stderr

# Use CROSSMARK for errors
def error(*msg): _message(CROSSMARK, sys.stderr, *msg)

# Use QUESTIONMARK for warnings
def warning(*msg): _message(QUESTIONMARK, sys.stderr, *msg)

# Use INFOMARK for information
def info(*msg): _message(INFOMARK, sys.stdout, *msg)

# Use CHECKMARK for success
def success(*msg): _message(CHECKMARK, sys.stdout, *msg)
