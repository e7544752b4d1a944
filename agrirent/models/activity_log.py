from agrirent.extensions import db
from agrirent.models.profile import utcnow

class ActivityLog(db.Model):
    __tablename__ = 'activity_log'

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)
    event_type = db.Column(db.String(100), index=True)
    status = db.Column(db.String(50), index=True)
    details = db.Column(db.Text)
    profile_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=True)
    ip_address = db.Column(db.String(45))
