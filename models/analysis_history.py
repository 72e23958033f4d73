from models import db
from datetime import datetime, timezone
from sqlalchemy.orm import validates


class AnalysisHistory(db.Model):
    """AnalysisHistory model - one analyzed input text with all of its sentence results"""
    __tablename__ = 'analysis_history'

    id = db.Column(db.Integer, primary_key=True)

    text = db.Column(db.Text, nullable=False)

    # 'llm' or 'rules'
    engine = db.Column(db.String(10), nullable=False, default='llm')

    sentence_count = db.Column(db.Integer, default=0)

    # List of {original, translation, analysis} records, in sentence order
    results_json = db.Column(db.JSON, nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)

    @validates('text')
    def validate_text(self, key, text):
        if not text or not text.strip():
            raise ValueError('Analyzed text cannot be empty or whitespace')
        return text.strip()

    def to_dict(self, include_results=True):
        data = {
            'id': self.id,
            'text': self.text,
            'engine': self.engine,
            'sentence_count': self.sentence_count,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if include_results:
            data['results'] = self.results_json
        return data

    def __repr__(self):
        return f'<AnalysisHistory {self.id} sentences={self.sentence_count} engine={self.engine}>'
