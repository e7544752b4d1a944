import logging
import time

from flask import Blueprint, render_template, request, redirect, url_for, jsonify, g, current_app, send_from_directory
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from agrirent.extensions import db
from agrirent.forms.forms import EquipmentFilterForm
from agrirent.models.equipment import EQUIPMENT_CATEGORIES
from agrirent.models.profile import Profile
from agrirent.security import SessionContext
from agrirent.services import catalog_service
from agrirent.services.retry import retrieve_from_config

logger = logging.getLogger(__name__)

main = Blueprint('main', __name__)

@main.route('/')
def home():
    return render_template('home.html', categories=EQUIPMENT_CATEGORIES)

@main.route('/dashboard')
def dashboard():
    # The profile row can trail the account by a moment right after signup
    profile_id = g.session_ctx.profile.id
    profile = retrieve_from_config(lambda: db.session.get(Profile, profile_id), current_app.config)
    if profile is None:
        return render_template('dashboard_pending.html')
    return redirect(url_for(SessionContext(profile).home_endpoint))

@main.route('/equipment')
def browse_equipment():
    form = EquipmentFilterForm(formdata=request.args)
    error = None
    try:
        equipment = catalog_service.list_available_equipment()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error fetching equipment: %s", e)
        equipment = []
        error = 'Equipment could not be loaded. Please try again.'

    filtered = catalog_service.filter_equipment(
        equipment,
        search=form.q.data,
        location=form.location.data,
        category=form.category.data
    )
    return render_template('equipment_browse.html', form=form, equipment=filtered, total=len(equipment), error=error)

@main.route('/uploads/<path:filename>')
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)

@main.route('/health')
def health():
    start = time.perf_counter()
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Health check failed: %s", e)
        return jsonify({'status': 'error', 'database': 'unreachable'}), 503
    elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
    return jsonify({'status': 'ok', 'database': 'ok', 'latency_ms': elapsed_ms})
