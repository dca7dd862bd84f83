import random
import string

def generate_random_string(length: int) -> str:
    characters = string.ascii_letters + string.digits
    random_string = "".join(random.choice(characters) for _ in range(length))
    return random_string

def mask_hex(s: str, keep: int = 4) -> str:
    """Shorten key material for log lines, e.g. `5553...6232`."""
    if len(s) <= keep * 2:
        return s
    return f"{s[:keep]}...{s[-keep:]}"
