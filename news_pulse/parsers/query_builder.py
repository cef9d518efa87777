"""관심 토픽 → 제공자 검색 쿼리"""

from typing import Dict

# 토픽별로 조정된 검색 쿼리 ({region}은 지역 한정어로 치환)
QUERY_PRESETS: Dict[str, str] = {
    "Technology": "(technology OR tech startup OR software) {region}",
    "AI": '(AI OR "artificial intelligence" OR "open source AI" OR GLM-5) {region}',
    "Economic": "(economy OR inflation OR GDP OR investment OR ตลาดทุน) {region}",
    "Political": "(การเมือง OR กกต OR เลือกตั้ง OR parliament OR corruption) {region}",
    "Business": "(business OR company earnings OR commerce OR startup funding) {region}",
}


def build_query(interest: str, region: str = "Thailand") -> str:
    """
    프리셋(대소문자 무시)이 있으면 프리셋, 없으면 "<interest> <region>".

    Args:
        interest: 관심 토픽 (정제된 값).
        region: 지역 한정어.
    """
    wanted = interest.strip().lower()
    for name, template in QUERY_PRESETS.items():
        if name.lower() == wanted:
            return template.format(region=region).strip()
    return f"{interest.strip()} {region}".strip()
