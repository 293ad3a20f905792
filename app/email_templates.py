"""HTML bodies for patient notification emails."""
from html import escape

_FOOTER = """
    <hr style="border: none; height: 1px; background-color: #e1e8ed; margin: 20px 0;">
    <p style="font-size: 12px; color: #95a5a6;">{note}</p>
"""


def _wrap(body: str) -> str:
    return f'<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">{body}</div>'


def request_received_template(patient_name: str, appointment_id: str, brand: str) -> str:
    body = f"""
    <h2 style="color: #2c3e50;">Appointment Request Received</h2>
    <p>Dear {escape(patient_name)},</p>
    <p>Your appointment request has been successfully submitted to {escape(brand)}.</p>
    <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h3 style="color: #27ae60;">What's Next?</h3>
        <ul>
            <li>Your doctor will review your request shortly</li>
            <li>You'll receive another email once the appointment is confirmed</li>
            <li>The confirmation will include your scheduled time and video consultation link</li>
        </ul>
    </div>
    <p style="color: #7f8c8d;">Appointment Reference: {escape(appointment_id)}</p>
    <p>Thank you for choosing {escape(brand)}!</p>
    """
    return _wrap(body + _FOOTER.format(note="This is an automated message. Please do not reply to this email."))


def appointment_confirmed_template(patient_name: str, doctor_name: str, when: str, join_link: str) -> str:
    body = f"""
    <h2 style="color: #27ae60;">Appointment Confirmed!</h2>
    <p>Dear {escape(patient_name)},</p>
    <p>Great news! Your appointment has been confirmed.</p>
    <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h3 style="color: #2c3e50;">Appointment Details</h3>
        <ul style="list-style: none; padding: 0;">
            <li style="margin: 10px 0;"><strong>Doctor:</strong> {escape(doctor_name)}</li>
            <li style="margin: 10px 0;"><strong>Date &amp; Time:</strong> {escape(when)}</li>
            <li style="margin: 10px 0;"><strong>Type:</strong> Virtual Consultation</li>
        </ul>
    </div>
    <div style="text-align: center; margin: 30px 0;">
        <a href="{escape(join_link, quote=True)}" style="background-color: #3498db; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; display: inline-block;">Join Video Consultation</a>
    </div>
    <p><strong>Important Notes:</strong></p>
    <ul>
        <li>Please join the meeting 5 minutes before your scheduled time</li>
        <li>Ensure you have a stable internet connection</li>
        <li>Have your ID ready for verification</li>
    </ul>
    <p>We look forward to serving you!</p>
    """
    return _wrap(body + _FOOTER.format(note="For any questions, please contact us. This is an automated message."))


def request_declined_template(patient_name: str, doctor_name: str, brand: str) -> str:
    body = f"""
    <h2 style="color: #c0392b;">Appointment Request Declined</h2>
    <p>Dear {escape(patient_name)},</p>
    <p>{escape(doctor_name)} is unable to take your appointment request at this time.</p>
    <p>You are welcome to submit a new request to another doctor on {escape(brand)}.</p>
    """
    return _wrap(body + _FOOTER.format(note="This is an automated message. Please do not reply to this email."))
