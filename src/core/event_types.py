"""이벤트 유형 상수"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # anvil preview
    ANVIL_PREPARED = "anvil_prepared"
    ANVIL_COST_DISPLAYED = "anvil_cost_displayed"

    # anvil extraction
    ANVIL_EXTRACTED = "anvil_extracted"
    ANVIL_EXTRACTION_DENIED = "anvil_extraction_denied"
