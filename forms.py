from flask_wtf import FlaskForm
from wtforms import BooleanField, IntegerField, SelectField, StringField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

import config
from services.comment_sorter import SORT_OPTIONS

_SORT_CHOICES = [("", "API order")] + [(option, option.title()) for option in SORT_OPTIONS]
_FALSE_VALUES = (False, "false", "False", "0", "off", "no", "")


class CommentsQueryForm(FlaskForm):
    """Query string of ``GET /api/comments``."""

    class Meta:
        csrf = False

    permalink = StringField("Permalink", validators=[DataRequired(), Length(min=2, max=512)])
    nested = BooleanField("Nested comments", false_values=_FALSE_VALUES)
    infinite = BooleanField("Infinite loading", false_values=_FALSE_VALUES)
    max_depth = IntegerField(
        "Max depth",
        default=config.DEFAULT_MAX_COMMENT_DEPTH,
        validators=[NumberRange(min=0, max=config.MAX_COMMENT_DEPTH_LIMIT)],
    )
    pages = IntegerField(
        "Pages",
        default=1,
        validators=[NumberRange(min=1, max=config.MAX_COMMENT_PAGES)],
    )
    sort = SelectField("Sort", choices=_SORT_CHOICES, default="", validators=[Optional()])


class ProcessCommentsForm(FlaskForm):
    """Options of ``POST /api/comments/process`` (comments travel in the JSON body)."""

    class Meta:
        csrf = False

    nested = BooleanField("Nested comments", false_values=_FALSE_VALUES)
    max_depth = IntegerField(
        "Max depth",
        default=config.DEFAULT_MAX_COMMENT_DEPTH,
        validators=[NumberRange(min=0, max=config.MAX_COMMENT_DEPTH_LIMIT)],
    )
    sort = SelectField("Sort", choices=_SORT_CHOICES, default="", validators=[Optional()])
