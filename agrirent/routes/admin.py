from flask import Blueprint, render_template, g

from agrirent.services import stats_service

admin = Blueprint('admin', __name__)

# Role checks happen in the session gate (agrirent.security.ROLE_POLICY)

@admin.route('/dashboard')
def dashboard():
    stats = stats_service.admin_statistics()
    return render_template('admin_dashboard.html', stats=stats, profile=g.session_ctx.profile)
