from sqlalchemy import Column, Integer, JSON
from database.db import Base

class Grade(Base):
    __tablename__ = "grades"  # 학습자 성적 기록 테이블

    id = Column(Integer, primary_key=True, index=True)          # 성적 기록 고유 ID (Primary Key)
    learner_id = Column(Integer, nullable=False, index=True)    # 학습자 ID
    class_id = Column(Integer, nullable=False, index=True)      # 반(클래스) ID
    scores = Column(JSON, nullable=False, default=list)         # 점수 목록 [{"type": "exam", "score": 90}, ...]
