"""
WTForms Form Classes for the Property Rentals Application

This module defines the forms used to validate submitted listings and
messages. Nested groups (location, rates, seller info) use dotted field
names such as ``rates.nightly`` so their errors come back grouped.
"""

from flask_wtf import FlaskForm
from wtforms import Form, StringField, TextAreaField, DecimalField, IntegerField, FloatField, SelectField, SelectMultipleField, FormField
from wtforms.validators import AnyOf, DataRequired, Email, InputRequired, Length, NumberRange, Optional, Regexp

from app.domain.enums import PROPERTY_TYPES, US_STATE_CODES


class LocationForm(Form):
    """Street address of a listing"""

    street = StringField('Street', validators=[
        Length(min=10, message='Street must be at least 10 characters long.')
    ])
    city = StringField('City', validators=[
        Length(min=2, message='City must be at least 2 characters long.')
    ])
    state = StringField('State', validators=[
        AnyOf(US_STATE_CODES, message='Enter a United States two letter state code.')
    ])
    zipcode = StringField('ZIP code', validators=[
        Regexp(r'^\d{5}(-\d{4})?$', message='Invalid ZIP code format.')
    ])


class RatesForm(Form):
    """Nightly, weekly and monthly rates; at least one must be given."""

    nightly = DecimalField('Nightly', validators=[
        Optional(),
        NumberRange(min=200, message='Nightly rate must be at least $200.')
    ])
    weekly = DecimalField('Weekly', validators=[
        Optional(),
        NumberRange(min=1000, message='Weekly rate must be at least $1000.')
    ])
    monthly = DecimalField('Monthly', validators=[
        Optional(),
        NumberRange(min=3200, message='Monthly rate must be at least $3200.')
    ])

    def validate(self, extra_validators=None):
        if not super().validate(extra_validators):
            return False
        if self.nightly.data is None and self.weekly.data is None and self.monthly.data is None:
            self.form_errors.append('At least one rate must be provided.')
            return False
        return True


class SellerInfoForm(Form):
    """Contact details shown to renters"""

    name = StringField('Name', validators=[
        Length(min=5, message='Name must be at least 5 characters.')
    ])
    email = StringField('Email', validators=[
        DataRequired(message='Enter a valid email address.'),
        Email(message='Enter a valid email address.')
    ])
    phone = StringField('Phone', validators=[
        DataRequired(message='Phone number is required.'),
        Length(max=40)
    ])


class PropertyForm(FlaskForm):
    """Listing creation / edit form"""

    name = StringField('Name', validators=[
        Length(min=10, max=200, message='Name must be at least 10 characters long.')
    ])
    type = SelectField('Type', choices=[(t, t) for t in PROPERTY_TYPES], validate_choice=False, validators=[
        AnyOf(PROPERTY_TYPES, message='Select a property type.')
    ])
    description = TextAreaField('Description', validators=[
        Optional(),
        Length(min=20, message='Description must be at least 20 characters long.')
    ])
    location = FormField(LocationForm, separator='.')
    beds = IntegerField('Beds', validators=[
        InputRequired(message='Property must have at least one bed.'),
        NumberRange(min=1, message='Property must have at least one bed.')
    ])
    baths = FloatField('Baths', validators=[
        InputRequired(message='Property must have at least one bath.'),
        NumberRange(min=0.5, message='Property must have at least one bath.')
    ])
    square_feet = IntegerField('Square feet', validators=[
        InputRequired(message='Property must have at least 250 square feet.'),
        NumberRange(min=250, message='Property must have at least 250 square feet.')
    ])
    amenities = SelectMultipleField('Amenities', validate_choice=False, validators=[
        Length(min=5, message='Select at least 5 amenities.')
    ])
    rates = FormField(RatesForm, separator='.')
    seller_info = FormField(SellerInfoForm, separator='.')


class MessageForm(FlaskForm):
    """Inquiry to the owner of a listing"""

    property_id = IntegerField('Property', validators=[
        InputRequired(message='Property is required.')
    ])
    name = StringField('Name', validators=[
        DataRequired(message='Name is required.'),
        Length(max=120)
    ])
    email = StringField('Email', validators=[
        DataRequired(message='Email is required.'),
        Email(message='Enter a valid email address.')
    ])
    phone = StringField('Phone', validators=[
        Optional(),
        Length(max=40)
    ])
    body = TextAreaField('Message', validators=[
        DataRequired(message='Message body is required.'),
        Length(max=2000, message='Message must be 2000 characters or less.')
    ])
