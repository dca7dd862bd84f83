def mb_to_bytes(n: int) -> int:
    return n << 20

def bytes_to_mb(n: int) -> int:
    return n >> 20
