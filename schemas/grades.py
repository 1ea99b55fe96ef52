from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

ScoreType = Literal["exam", "homework", "quiz"]   # 점수 유형


# ==========================================================
# [입력] 요청 바디 스키마
# ==========================================================

class ScoreCreate(BaseModel):
    type: ScoreType                          # 점수 유형 (exam / homework / quiz)
    score: float = Field(..., allow_inf_nan=False)   # 점수 (NaN/Infinity 거부)


class ScoreMatch(BaseModel):
    """점수 제거 조건. 지정한 필드가 모두 같은 항목만 제거"""
    type: Optional[ScoreType] = None
    score: Optional[float] = Field(None, allow_inf_nan=False)

    @model_validator(mode="after")
    def _require_condition(self):
        if self.type is None and self.score is None:
            raise ValueError("type 또는 score 중 하나는 지정해야 합니다")
        return self

    def as_filter(self) -> dict:
        return self.model_dump(exclude_none=True)


class GradeCreate(BaseModel):
    learner_id: int                          # 학습자 ID (구버전 student_id도 허용)
    class_id: int                            # 반 ID
    scores: List[ScoreCreate] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _rename_student_id(cls, data: Any):
        # 하위 호환: student_id → learner_id
        if isinstance(data, dict) and data.get("student_id"):
            data = dict(data)
            data["learner_id"] = data.pop("student_id")
        return data


class ClassMove(BaseModel):
    class_id: int                            # 옮겨 갈 반 ID


# ==========================================================
# [스냅샷] 저장된 기록 (집계 입력)
# - 저장소에 이미 들어간 값은 유형/점수가 비정상일 수 있으므로 느슨하게 받음
# ==========================================================

class ScoreEntry(BaseModel):
    type: Any = None                         # 인식하지 못하는 유형(문자열이 아닌 값 포함)은 집계에서 제외
    score: Any = None                        # 숫자가 아닌 값은 집계에서 제외

    model_config = ConfigDict(extra="ignore")


class GradeRecord(BaseModel):
    id: Optional[int] = None                 # 성적 기록 고유 ID
    learner_id: int                          # 학습자 ID
    class_id: int                            # 반 ID
    scores: List[ScoreEntry] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, frozen=True)


# ==========================================================
# [출력] 집계 결과 / 쓰기 결과
# ==========================================================

class LearnerStat(BaseModel):
    learner_id: int
    avg: float


class ClassStats(BaseModel):
    total_learners: int = Field(0, alias="totalLearners")
    learners_above_50: int = Field(0, alias="learnersAbove50")
    percentage_above_50: float = Field(0, alias="percentageAbove50")

    model_config = ConfigDict(populate_by_name=True)


class ClassAverage(BaseModel):
    class_average: float = Field(..., alias="classAverage")

    model_config = ConfigDict(populate_by_name=True)


class DeleteResult(BaseModel):
    deleted_count: int = Field(..., alias="deletedCount")

    model_config = ConfigDict(populate_by_name=True)


class UpdateResult(BaseModel):
    modified_count: int = Field(..., alias="modifiedCount")

    model_config = ConfigDict(populate_by_name=True)
