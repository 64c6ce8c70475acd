"""상품 식별자 생성"""
import uuid

TEMP_ID_PREFIX = "temp-"


def generate_id() -> str:
    return str(uuid.uuid4())


def generate_temp_id() -> str:
    """서버 확정 전 낙관적 생성용 임시 ID"""
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"


def is_temp_id(product_id: str) -> bool:
    return product_id.startswith(TEMP_ID_PREFIX)
