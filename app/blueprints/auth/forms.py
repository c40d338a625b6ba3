from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SubmitField, HiddenField, SelectField
from wtforms.validators import DataRequired, Length, Email, EqualTo, Regexp, Optional

class LoginForm(FlaskForm):
    """用户登录表单"""
    email = StringField('Email address', validators=[
        DataRequired(message="Please enter your email"),
        Email(message="Invalid email address")
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message="Please enter your password")
    ])
    remember_me = BooleanField('Keep me signed in')
    submit = SubmitField('Sign in')

class SignupForm(FlaskForm):
    """注册第一步：资料表单"""
    account_type = HiddenField(default='individual')
    first_name = StringField('First name', validators=[
        DataRequired(message="Please enter your first name"), Length(max=64)
    ])
    last_name = StringField('Last name', validators=[
        DataRequired(message="Please enter your last name"), Length(max=64)
    ])
    email = StringField('Email address', validators=[
        DataRequired(message="Please enter your email"), Email(message="Invalid email address")
    ])
    password = PasswordField('Password', validators=[
        DataRequired(), Length(min=8, message="Password must be at least 8 characters")
    ])
    submit = SubmitField('Create account')

class VerifyCodeForm(FlaskForm):
    """注册第二步：邮箱验证码"""
    code = StringField('Verification code', validators=[
        DataRequired(message="Please enter the code we emailed you"),
        Regexp(r'^\d{6}$', message="The code is 6 digits")
    ])
    submit = SubmitField('Verify email')

class ForgotPasswordForm(FlaskForm):
    email = StringField('Email address', validators=[DataRequired(), Email()])
    submit = SubmitField('Send reset link')

class ResetPasswordForm(FlaskForm):
    """重置密码（邮件链接中带 email 和 token）"""
    email = StringField('Email address', validators=[
        DataRequired(message="Email and token are required"), Email()
    ])
    token = StringField('Reset token', validators=[
        DataRequired(message="Email and token are required")
    ])
    password = PasswordField('New password', validators=[
        DataRequired(), Length(min=6, message="Password must be at least 6 characters")
    ])
    confirm_password = PasswordField('Confirm password', validators=[
        DataRequired(), EqualTo('password', message='Passwords do not match')
    ])
    submit = SubmitField('Reset password')

class OnboardingForm(FlaskForm):
    """注册后的补充信息"""
    goal = SelectField('Main goal', choices=[
        ('study', 'Find a study program'),
        ('scholarship', 'Finance my studies'),
        ('career', 'Plan my career'),
        ('recruit', 'Recruit students'),
    ])
    organization = StringField('School or organization', validators=[Optional(), Length(max=128)])
    country = StringField('Country', validators=[Optional(), Length(max=64)])
    submit = SubmitField('Continue')
