from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms import StringField, TextAreaField, SelectField, SubmitField
from wtforms.fields import DateField
from wtforms.validators import DataRequired, Optional

from agrirent.models.equipment import EQUIPMENT_CATEGORIES

# Form for listing new equipment
class EquipmentForm(FlaskForm):
    name = StringField('Equipment Name')
    description = TextAreaField('Description')
    category = SelectField('Category',
                           choices=[('', 'Select a category')] + [(c, c) for c in EQUIPMENT_CATEGORIES],
                           validate_choice=False)
    # Parsed by the catalog service so that bad prices get its message
    price_per_day = StringField('Price per Day')
    location = StringField('Location')
    image = FileField('Equipment Image')
    submit = SubmitField('Add Equipment')

# Rental period chosen at checkout
class CheckoutForm(FlaskForm):
    start_date = DateField('Start Date', format='%Y-%m-%d', validators=[DataRequired(message="Please select a start date.")])
    end_date = DateField('End Date', format='%Y-%m-%d', validators=[DataRequired(message="Please select an end date.")])
    submit = SubmitField('Confirm Booking')

# Browse filters, read from the query string
class EquipmentFilterForm(FlaskForm):
    class Meta:
        csrf = False

    q = StringField('Search', validators=[Optional()])
    location = StringField('Location', validators=[Optional()])
    category = SelectField('Category',
                           choices=[('', 'All categories')] + [(c, c) for c in EQUIPMENT_CATEGORIES],
                           validate_choice=False)
