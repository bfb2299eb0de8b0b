from html import escape


def forgot_password_template(name: str, reset_link: str, expires_minutes: int = 15) -> str:
    return f"""
    <p>Hello {escape(name)},</p>
    <p>You requested a password reset. Click the link below to reset your password:</p>
    <a href="{escape(reset_link, quote=True)}" style="background:#007bff; padding:10px 15px; color:white; text-decoration:none; border-radius:5px;">
      Reset Password
    </a>
    <p>This link expires in {expires_minutes} minutes.</p>
    <p>If you did not request this, please ignore this email.</p>
    """


def welcome_template(name: str) -> str:
    return f"""
    <p>Hi {escape(name)},</p>
    <p>Welcome to Taskboard! We are excited to have you.</p>
    <p>Let us know if you need any help.</p>
    """
