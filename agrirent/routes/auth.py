import logging

from flask import Blueprint, render_template, redirect, url_for, flash, request, g
from flask_login import login_user, logout_user
from markupsafe import Markup
from sqlalchemy.exc import SQLAlchemyError
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, BooleanField, TextAreaField
from wtforms.fields import FloatField, IntegerField, EmailField
from wtforms.validators import DataRequired, Email, Optional, NumberRange, ValidationError

from agrirent.models.profile import ROLE_FARMER, ROLE_OWNER, FARMER_FIELDS, OWNER_FIELDS
from agrirent.security import SessionContext, is_safe_redirect
from agrirent.services import account_service, notification_service
from agrirent.services.log_service import log_event

logger = logging.getLogger(__name__)

auth = Blueprint('auth', __name__)

# --- Signup forms ---
class SignupForm(FlaskForm):
    full_name = StringField('Full Name', validators=[DataRequired(message="This field is required.")])
    email = EmailField('Email', validators=[DataRequired(message="This field is required."), Email(message="Please enter a valid email address.")])
    phone = StringField('Phone', validators=[Optional()])
    password = PasswordField('Password', validators=[DataRequired(message="This field is required.")])
    confirm_password = PasswordField('Confirm Password', validators=[DataRequired(message="This field is required.")])
    submit = SubmitField('Create Account')

    def validate_confirm_password(self, field):
        error = account_service.validate_passwords(self.password.data, field.data)
        if error:
            raise ValidationError(error)

class FarmerSignupForm(SignupForm):
    farm_name = StringField('Farm Name', validators=[Optional()])
    farm_size_acres = FloatField('Farm Size (acres)', validators=[Optional(), NumberRange(min=0, message="Farm size cannot be negative.")])
    farm_location = StringField('Farm Location', validators=[Optional()])
    crop_types = TextAreaField('Crop Types', validators=[Optional()])

class OwnerSignupForm(SignupForm):
    business_name = StringField('Business Name', validators=[Optional()])
    property_address = TextAreaField('Property Address', validators=[Optional()])
    equipment_count = IntegerField('Number of Equipment', validators=[Optional(), NumberRange(min=0, message="Equipment count cannot be negative.")])
    service_area = StringField('Service Area', validators=[Optional()])

class LoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(message="This field is required.")])
    password = PasswordField('Password', validators=[DataRequired(message="This field is required.")])
    remember = BooleanField('Remember me')
    submit = SubmitField('Log In')

SIGNUP_FORMS = {
    ROLE_FARMER: (FarmerSignupForm, FARMER_FIELDS, 'signup_farmer.html'),
    ROLE_OWNER: (OwnerSignupForm, OWNER_FIELDS, 'signup_owner.html'),
}

# --- Helpers ---
def _after_login_target(profile):
    target = request.args.get('redirect')
    if is_safe_redirect(target):
        return target
    return url_for(SessionContext(profile).home_endpoint)

def _signup(role):
    form_class, role_fields, template = SIGNUP_FORMS[role]
    form = form_class()
    error = None

    if form.validate_on_submit():
        fields = {name: getattr(form, name).data for name in role_fields}
        fields = {name: (value.strip() if isinstance(value, str) else value) for name, value in fields.items()}
        try:
            profile = account_service.create_profile(
                role=role,
                email=form.email.data,
                password=form.password.data,
                full_name=form.full_name.data.strip(),
                phone=(form.phone.data or '').strip() or None,
                **fields
            )
        except account_service.DuplicateEmailError as e:
            login_link = url_for('auth.login')
            error = Markup('{} <a href="{}" class="underline">Log in instead.</a>').format(str(e), login_link)
        except account_service.SignupError as e:
            error = str(e)
        except SQLAlchemyError as e:
            logger.error("Signup failed for %s: %s", form.email.data, e)
            error = 'An error occurred during signup'
        else:
            log_event("Signup", "SUCCESS", {"role": role}, profile_id=profile.id, ip_address=request.remote_addr)
            notification_service.send_welcome_email(profile)
            return redirect(url_for('auth.signup_success', role=role))

    return render_template(template, form=form, error=error)

# --- Routes ---
@auth.route('/login', methods=['GET', 'POST'])
def login():
    if g.session_ctx.is_authenticated:
        return redirect(url_for(g.session_ctx.home_endpoint))

    form = LoginForm()
    error = None
    if form.validate_on_submit():
        logger.info("Login attempt for %s", form.email.data.strip())
        try:
            profile = account_service.authenticate(form.email.data, form.password.data)
        except account_service.AuthenticationError as e:
            logger.warning("Login failed for %s: %s", form.email.data.strip(), e)
            error = account_service.auth_error_message(str(e))
        else:
            login_user(profile, remember=form.remember.data)
            return redirect(_after_login_target(profile))

    return render_template('login.html', form=form, error=error)

@auth.route('/admin/login', methods=['GET', 'POST'])
def admin_login():
    form = LoginForm()
    error = None
    if form.validate_on_submit():
        try:
            profile = account_service.authenticate(form.email.data, form.password.data)
        except account_service.AuthenticationError as e:
            logger.warning("Admin login failed for %s: %s", form.email.data.strip(), e)
            error = str(e)
        else:
            if not profile.is_admin:
                logout_user()
                log_event("Admin Login", "DENIED", {"email": profile.email}, profile_id=profile.id, ip_address=request.remote_addr)
                error = 'Access denied. Admin credentials required.'
            else:
                login_user(profile, remember=form.remember.data)
                return redirect(url_for('admin.dashboard'))

    return render_template('admin_login.html', form=form, error=error)

@auth.route('/signup')
def signup():
    return render_template('signup_role.html')

@auth.route('/signup/farmer', methods=['GET', 'POST'])
def signup_farmer():
    return _signup(ROLE_FARMER)

@auth.route('/signup/owner', methods=['GET', 'POST'])
def signup_owner():
    return _signup(ROLE_OWNER)

@auth.route('/signup/success')
def signup_success():
    role = request.args.get('role')
    if role not in SIGNUP_FORMS:
        role = None
    return render_template('signup_success.html', role=role)

@auth.route('/logout', methods=['POST'])
def logout():
    logout_user()
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))
