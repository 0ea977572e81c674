"""Default rows written by ``setup_system`` into empty tables."""

from datetime import date

DEFAULT_HOLIDAYS = (
    (date(2025, 1, 26), "Republic Day", "Public Holiday"),
    (date(2025, 8, 15), "Independence Day", "Public Holiday"),
)

OFFER_LETTER = """
<h1>Offer Letter</h1>
<p>Date: {{current_date}}</p>
<br>
<p>Dear {{employee_name}},</p>
<p>We are pleased to offer you the position of <b>{{designation}}</b>.</p>
<p>Your start date will be {{start_date}}.</p>
<p>Your annual salary will be {{salary}}.</p>
<br>
<p>Sincerely,</p>
<p><b>Human Resources</b></p>
"""

EXPENSE_REPORT = """
<h1>Expense Report</h1>
<p><b>Employee:</b> {{employee_name}}</p>
<p><b>Date of Expense:</b> {{expense_date}}</p>
<p><b>Amount:</b> {{currency}} {{amount}}</p>
<p><b>Description:</b></p>
<p>{{description}}</p>
<p><b>Receipt URL:</b> <a href="{{receipt_url}}">{{receipt_url}}</a></p>
"""

WFH_REQUEST = """
<h1>Work From Home Request</h1>
<p><b>Employee:</b> {{employee_name}}</p>
<p><b>Start Date:</b> {{start_date}}</p>
<p><b>End Date:</b> {{end_date}}</p>
<p><b>Reason:</b></p>
<p>{{reason}}</p>
"""

ADDRESS_VERIFICATION = """
<h1>To Whom It May Concern</h1>
<br>
<p>This is to certify that <b>{{employee_name}}</b> is an employee of this company.</p>
<p>As per our records, their current residential address is:</p>
<p><b>{{employee_address}}<br>{{city}}, {{state}} - {{zip_code}}</b></p>
<p>This letter is issued upon the request of the employee for verification purposes.</p>
<br>
<p>Sincerely,</p>
<p><b>HR Department</b></p>
"""

EMPLOYMENT_VERIFICATION = """
<h1>To Whom It May Concern</h1>
<br>
<p>This is to certify that <b>{{employee_name}}</b> has been an employee of this company since <b>{{doj}}</b>.</p>
<p>Their current designation is <b>{{designation}}</b> in the <b>{{department}}</b> department.</p>
<p>This letter is issued upon the request of the employee for employment verification.</p>
<br>
<p>Sincerely,</p>
<p><b>HR Department</b></p>
"""

DEFAULT_TEMPLATES = (
    ("OFFER-001", "Offer Letter", OFFER_LETTER),
    ("EXPENSE-001", "Expense Reimbursement Request", EXPENSE_REPORT),
    ("WFH-001", "Work From Home Request", WFH_REQUEST),
    ("ADDR-VER-001", "Address Verification Letter", ADDRESS_VERIFICATION),
    ("EMP-VER-001", "Employment Verification Letter", EMPLOYMENT_VERIFICATION),
)
