"""Generate monthly chatter earnings statements as PDF."""
import io
from datetime import datetime

from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.units import inch
from reportlab.platypus import (
    SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, HRFlowable,
)
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_RIGHT

from agency_os.core.config import settings
from agency_os.schemas.reporting import AgentDetail


def generate_agent_statement_pdf(detail: AgentDetail) -> bytes:
    """Render an AgentDetail (one month) into a PDF statement."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.5 * inch,
        leftMargin=0.5 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
    )

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name='CompanyName',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=colors.HexColor('#0a8bcc'),
        spaceAfter=2,
    ))
    styles.add(ParagraphStyle(
        name='SheetTitle',
        parent=styles['Heading2'],
        fontSize=13,
        textColor=colors.HexColor('#334155'),
        spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        name='SectionHeader',
        parent=styles['Heading3'],
        fontSize=11,
        textColor=colors.HexColor('#1e293b'),
        spaceBefore=8,
        spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        name='SmallRight',
        parent=styles['Normal'],
        fontSize=8,
        alignment=TA_RIGHT,
        textColor=colors.HexColor('#64748b'),
    ))

    story = []
    symbol = settings.CURRENCY_SYMBOL
    fmt = lambda n: f"{symbol}{n:,.2f}"
    earnings = detail.earnings
    start = earnings.window.start
    period_display = start.strftime("%B %Y")

    # ── Header ────────────────────────────────────────────────────
    story.append(Paragraph(settings.COMPANY_NAME, styles['CompanyName']))
    story.append(Paragraph(f"Earnings Statement: {period_display}", styles['SheetTitle']))
    story.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#0a8bcc')))
    story.append(Spacer(1, 8))

    if earnings.commission_percent:
        plan = f"{earnings.commission_percent}% commission"
    elif earnings.flat_salary_per_month is not None:
        plan = f"{fmt(earnings.flat_salary_per_month)} / month"
    else:
        plan = "BASE only"
    info_table = Table(
        [
            ["Chatter:", earnings.agent_name or f"#{earnings.agent_id}", "Period:", period_display],
            ["Plan:", plan, "Sales:", str(earnings.transaction_count)],
        ],
        colWidths=[0.8 * inch, 2.6 * inch, 0.8 * inch, 2.6 * inch],
    )
    info_table.setStyle(TableStyle([
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTNAME', (2, 0), (2, -1), 'Helvetica-Bold'),
        ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#475569')),
        ('TEXTCOLOR', (2, 0), (2, -1), colors.HexColor('#475569')),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
        ('TOPPADDING', (0, 0), (-1, -1), 3),
    ]))
    story.append(info_table)
    story.append(Spacer(1, 12))

    # ── Summary ───────────────────────────────────────────────────
    story.append(Paragraph("Summary", styles['SectionHeader']))
    sum_rows = [
        ["Sales", fmt(earnings.sales_total), "Commission", fmt(earnings.commission_component)],
        ["BASE", fmt(earnings.flat_total), "Fixed Salary", fmt(earnings.salary_component)],
        ["Payments Received", fmt(earnings.payments_in_window), "Total Earnings", fmt(earnings.total_earnings)],
        ["", "", "Amount Owed", fmt(earnings.amount_owed)],
    ]
    sum_table = Table(sum_rows, colWidths=[1.7 * inch, 1.7 * inch, 1.7 * inch, 1.7 * inch])
    sum_style = [
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('ALIGN', (3, 0), (3, -1), 'RIGHT'),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ('TOPPADDING', (0, 0), (-1, -1), 4),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#e2e8f0')),
        ('FONTNAME', (2, -1), (-1, -1), 'Helvetica-Bold'),
    ]
    # Overpayment in red
    if earnings.amount_owed < 0:
        sum_style.append(('TEXTCOLOR', (3, -1), (3, -1), colors.HexColor('#dc2626')))
    sum_table.setStyle(TableStyle(sum_style))
    story.append(sum_table)
    story.append(Spacer(1, 14))

    # ── Daily detail ──────────────────────────────────────────────
    story.append(Paragraph("Daily Breakdown", styles['SectionHeader']))
    table_data = [["Date", "Sales", "#", "Commission", "BASE", "Salary"]]
    for row in detail.daily_breakdown:
        table_data.append([
            row.day.isoformat(),
            fmt(row.sales),
            str(row.count),
            fmt(row.commission),
            fmt(row.flat_earnings),
            fmt(row.salary_portion),
        ])
    daily_table = Table(table_data, repeatRows=1)
    daily_table.setStyle(TableStyle([
        ('FONTSIZE', (0, 0), (-1, -1), 7.5),
        ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
        ('LINEBELOW', (0, 0), (-1, 0), 1, colors.HexColor('#334155')),
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f1f5f9')),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#fafafa')]),
    ]))
    story.append(daily_table)

    if detail.payments:
        story.append(Paragraph("Payments", styles['SectionHeader']))
        pay_data = [["Date", "Amount"]]
        pay_data += [[p.paid_at.strftime("%Y-%m-%d"), fmt(p.amount)] for p in detail.payments]
        pay_table = Table(pay_data, colWidths=[1.5 * inch, 1.5 * inch])
        pay_table.setStyle(TableStyle([
            ('FONTSIZE', (0, 0), (-1, -1), 8),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('LINEBELOW', (0, 0), (-1, 0), 1, colors.HexColor('#334155')),
        ]))
        story.append(pay_table)

    # Footer
    story.append(Spacer(1, 16))
    story.append(HRFlowable(width="100%", thickness=0.5, color=colors.HexColor('#cbd5e1')))
    story.append(Spacer(1, 4))
    story.append(Paragraph(
        f"Generated on {datetime.utcnow().strftime('%B %d, %Y at %H:%M UTC')} by {settings.COMPANY_NAME}",
        styles['SmallRight']
    ))

    doc.build(story)
    return buffer.getvalue()
