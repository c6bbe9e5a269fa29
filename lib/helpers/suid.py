import shortuuid


def get_suid(length: int = 10) -> str:
    return shortuuid.ShortUUID().random(length=length)
