from flask import current_app

from casino import db, sms
from casino.models import Player, RedemptionRequest, SecurityAlert, utcnow


def send_email(to: str, subject: str, content: str) -> bool:
    # No mail provider is wired up; the log line is the delivery record
    current_app.logger.info(f"[email] to={to} subject={subject!r} body={content.strip()!r}")
    return True


def create_security_alert(alert_type: str, severity: str, title: str, description: str,
                          player_id: int = None) -> SecurityAlert:
    alert = SecurityAlert(
        alert_type=alert_type,
        severity=severity,
        title=title,
        description=description,
        player_id=player_id,
    )
    db.session.add(alert)
    db.session.commit()
    current_app.logger.info(f"[alert] type={alert_type} severity={severity} player={player_id} title={title!r}")
    return alert


def resolve_security_alert(alert: SecurityAlert) -> SecurityAlert:
    alert.status = 'resolved'
    alert.resolved_at = utcnow()
    db.session.add(alert)
    db.session.commit()
    return alert


def notify_purchase(player: Player, amount, currency: str, item: str) -> None:
    content = (
        f"Hello {player.name}!\n\n"
        f"This is a confirmation of your purchase.\n\n"
        f"Item: {item}\n"
        f"Amount: {amount} {currency}\n"
        f"Date: {utcnow().strftime('%Y-%m-%d %H:%M:%S')} UTC\n\n"
        f"Thank you for playing with us!"
    )
    send_email(player.email, 'Purchase Confirmation', content)
    if currency == 'USD' and player.phone:
        sms.send_deposit_confirmation(player.phone, amount, currency)
    if currency == 'SC':
        create_security_alert(
            'PURCHASE', 'low', 'SC Purchase Notification',
            f"Player ID {player.id} spent {amount} SC on {item}", player_id=player.id,
        )


def notify_redemption_decision(player: Player, redemption: RedemptionRequest, approved: bool) -> None:
    amount = float(redemption.amount_sc)
    if approved:
        subject = 'Redemption Approved'
        content = f"Your redemption of {amount} SC via {redemption.method} has been approved."
    else:
        subject = 'Redemption Rejected'
        content = (
            f"Your redemption of {amount} SC was rejected. "
            f"Reason: {redemption.rejected_reason or 'not specified'}."
        )
    send_email(player.email, subject, content)
    if player.phone:
        if approved:
            sms.send_withdrawal_notification(player.phone, amount, 'SC')
        else:
            sms.send_sms(player.phone, content)


def notify_win(player: Player, amount, game_name: str) -> None:
    if player.phone:
        sms.send_win_notification(player.phone, amount, game_name, 'SC')
