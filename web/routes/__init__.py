"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounting: 계정과목표, 분개, 잔액/요약
"""
