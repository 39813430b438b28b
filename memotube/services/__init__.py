"""서비스 패키지: 비즈니스 로직 계층.

Service package: Business logic layer.
Services enforce ownership and business rules, call repositories for DB
operations and are constructed once per application in ``AppContext``.
"""
