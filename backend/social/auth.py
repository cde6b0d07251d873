from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# 1. Usernames compare case- and whitespace-insensitively
def normalize_username(raw: str) -> str:
    return raw.strip().lower()

# 2. Hash / verify credentials
def hash_credential(credential: str) -> str:
    return pwd_context.hash(credential)

def verify_credential(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)
