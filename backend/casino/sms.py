"""Outbound SMS and voice through Twilio.

``SmsService`` is a Flask extension: ``init_app`` reads the Twilio
credentials from config and builds a REST client. Without credentials the
service stays disabled and every send reports ``SMS not configured`` instead
of raising, so notification paths never break a request.
"""

from flask import current_app
from requests.exceptions import RequestException
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from casino.errors import ApiError


class SmsService:
    def __init__(self, app=None):
        self.client = None
        self.from_number = ''
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        sid = app.config.get('TWILIO_ACCOUNT_SID')
        token = app.config.get('TWILIO_AUTH_TOKEN')
        self.from_number = app.config.get('TWILIO_PHONE_NUMBER') or ''
        self.client = Client(sid, token) if sid and token else None
        app.extensions['sms'] = self

    @property
    def enabled(self) -> bool:
        return self.client is not None and bool(self.from_number)

    def send_sms(self, to: str, body: str) -> dict:
        if not self.enabled:
            current_app.logger.warning(f"[sms-skip] to={to} not configured")
            return {'success': False, 'error': 'SMS not configured'}
        try:
            message = self.client.messages.create(body=body, from_=self.from_number, to=to)
        except (TwilioException, RequestException) as exc:
            current_app.logger.error(f"[sms-error] to={to} error={exc}")
            return {'success': False, 'error': str(exc)}
        current_app.logger.info(f"[sms-sent] to={to} sid={message.sid}")
        return {'success': True, 'message_sid': message.sid}

    def send_otp(self, to: str, code: str) -> dict:
        return self.send_sms(to, f"Your verification code is: {code}. This code expires in 10 minutes.")

    def send_2fa_code(self, to: str, code: str) -> dict:
        return self.send_sms(
            to, f"Your two-factor authentication code is: {code}. Do not share this code with anyone."
        )

    def send_deposit_confirmation(self, to: str, amount, currency: str = 'USD') -> dict:
        return self.send_sms(
            to,
            f"Your deposit of {amount} {currency} has been received. "
            f"Your account is now credited. Thank you for playing!",
        )

    def send_withdrawal_notification(self, to: str, amount, currency: str = 'SC') -> dict:
        return self.send_sms(
            to,
            f"Your redemption request of {amount} {currency} is being processed. "
            f"You will receive your funds within 1-3 business days.",
        )

    def send_win_notification(self, to: str, amount, game_name: str, currency: str = 'SC') -> dict:
        return self.send_sms(
            to, f"Congratulations! You won {amount} {currency} in {game_name}! Your account has been credited."
        )

    def send_security_alert(self, to: str, alert_type: str, details: str) -> dict:
        return self.send_sms(
            to,
            f"Security Alert: {alert_type}. {details}. "
            f"If this wasn't you, please contact support immediately.",
        )

    def send_promotion(self, to: str, title: str, details: str) -> dict:
        return self.send_sms(to, f"{title}: {details}. Play now to claim your reward!")

    def initiate_call(self, to: str, twiml_url: str) -> dict:
        if not self.enabled:
            return {'success': False, 'error': 'SMS not configured'}
        try:
            call = self.client.calls.create(url=twiml_url, to=to, from_=self.from_number)
        except (TwilioException, RequestException) as exc:
            current_app.logger.error(f"[call-error] to={to} error={exc}")
            return {'success': False, 'error': str(exc)}
        return {'success': True, 'call_sid': call.sid}

    def get_message_status(self, message_sid: str) -> str:
        if not self.enabled:
            raise ApiError('SMS not configured', 503)
        try:
            return self.client.messages(message_sid).fetch().status
        except (TwilioException, RequestException) as exc:
            current_app.logger.error(f"[sms-status-error] sid={message_sid} error={exc}")
            raise ApiError(f'SMS provider error: {exc}', 502) from exc
