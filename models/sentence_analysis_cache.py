from models import db
from datetime import datetime, timezone


class SentenceAnalysisCache(db.Model):
    """SentenceAnalysisCache model - caches successful per-sentence LLM results per model"""
    __tablename__ = 'sentence_analysis_cache'

    id = db.Column(db.Integer, primary_key=True)

    sentence = db.Column(db.Text, nullable=False)

    # 'llm' or 'rules'
    engine = db.Column(db.String(10), nullable=False, default='llm')

    translation = db.Column(db.Text, nullable=False, default='')

    # {"mainComponents": [...]}
    analysis_json = db.Column(db.JSON, nullable=False)

    # Requested model, e.g., gemini-2.0-flash, gpt-4o-mini
    model_name = db.Column(db.String, nullable=False)

    total_tokens = db.Column(db.Integer, default=0)

    hit_count = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('sentence', 'engine', 'model_name', name='uq_sentence_engine_model'),
    )

    def to_record(self):
        """Return the cached result as a sentence record"""
        return {
            'original': self.sentence,
            'translation': self.translation,
            'analysis': self.analysis_json,
        }

    def __repr__(self):
        return f'<SentenceAnalysisCache {self.id} engine={self.engine} model={self.model_name}>'
