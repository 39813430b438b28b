"""레포지토리 패키지: 데이터베이스 쿼리 계층.

Repository package: Database query layer.
Contains all repository classes that handle pure database operations.
Resource repositories extend BaseRepository for ownership-scoped CRUD and
add domain-specific queries.
"""
