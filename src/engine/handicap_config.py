"""WHS 핸디캡 설정 상수."""

# 표준 slope (slope rating 113 = 평균 난이도)
SLOPE_BASELINE = 113

# WHS index multiplier (best-N 평균 × 0.96). 변경 금지.
INDEX_MULTIPLIER = 0.96

# Handicap index 하한선
MIN_HANDICAP_INDEX = 0.0

# Handicap index 상한선 (profiles/bags 컬럼 CHECK 제약)
MAX_HANDICAP_INDEX = 54.0

CALCULATION_METHOD = 'WHS'

# ─── Selection ───

# 최근 N 라운드 window
WINDOW_SIZE = 20

# window가 가득 찼을 때 사용하는 best differential 수
MAX_DIFFERENTIALS_USED = 8

# 5 ≤ n < 20 구간 비율 (floor(n × 0.4))
PARTIAL_WINDOW_RATIO = 0.4

# 5 라운드 미만 구간 (3 ≤ n < 5 → best 1)
PARTIAL_WINDOW_MIN_ROUNDS = 5

# 공식 index 산출 최소 라운드
MIN_ROUNDS_FOR_INDEX = 3

# ─── Eligibility ───

DEFAULT_PAR = 72

# score ∈ [par - 10, par + 50]
SCORE_UNDER_PAR_LIMIT = 10
SCORE_OVER_PAR_LIMIT = 50

# USGA slope 유효 범위
MIN_SLOPE_RATING = 55
MAX_SLOPE_RATING = 155

MIN_COURSE_RATING = 60.0
MAX_COURSE_RATING = 80.0

# ─── History ───

HISTORY_LIMIT = 50
