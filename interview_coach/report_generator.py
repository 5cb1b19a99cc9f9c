import io
import logging
from datetime import datetime
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .results import recommendation_for
from .schemas import AnswerAnalysis, InterviewResult, PersonalityProfile

logger = logging.getLogger('report_generator')

MAX_ANSWER_CHARS = 600


def score_color(score: int) -> HexColor:
    if score >= 85:
        return HexColor('#4caf50')  # Green
    elif score >= 75:
        return HexColor('#2196f3')  # Blue
    elif score >= 50:
        return HexColor('#ff9800')  # Orange
    return HexColor('#f44336')  # Red


class ReportGenerator:
    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles for the report"""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=24,
            spaceAfter=20,
            textColor=HexColor('#1a237e'),
            alignment=1,  # Center alignment
            leading=28
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=16,
            spaceAfter=12,
            spaceBefore=18,
            textColor=HexColor('#0d47a1'),
            leading=20
        ))

        self.styles.add(ParagraphStyle(
            name='ListItem',
            parent=self.styles['Normal'],
            fontSize=11,
            leftIndent=20,
            spaceAfter=6,
            bulletIndent=10,
            textColor=HexColor('#37474f'),
            leading=14
        ))

        self.styles.add(ParagraphStyle(
            name='QuestionHeader',
            parent=self.styles['Normal'],
            fontSize=12,
            spaceBefore=10,
            spaceAfter=6,
            textColor=HexColor('#1a237e'),
            leading=15
        ))

    def _create_score_table(self, score: int) -> Table:
        """Table displaying the overall interview score"""
        color = score_color(score)
        table = Table([['Overall Score', f'{score}%']], colWidths=[4*inch, 2*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HexColor('#f5f5f5')),
            ('TEXTCOLOR', (0, 0), (-1, 0), color),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 16),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
            ('TOPPADDING', (0, 0), (-1, 0), 12),
            ('GRID', (0, 0), (-1, -1), 1, HexColor('#e0e0e0')),
            ('BOX', (0, 0), (-1, -1), 2, color)
        ]))
        return table

    def _create_metrics_table(self, metrics) -> Table:
        data = [['Metric', 'Score']]
        for name, value in metrics.items():
            data.append([name.replace('_', ' ').title(), f'{value}%'])
        table = Table(data, colWidths=[3*inch, 1.5*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HexColor('#f5f5f5')),
            ('TEXTCOLOR', (0, 0), (-1, 0), HexColor('#1a237e')),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('GRID', (0, 0), (-1, -1), 1, HexColor('#e0e0e0')),
            ('PADDING', (0, 0), (-1, -1), 8),
            ('BOX', (0, 0), (-1, -1), 2, HexColor('#1a237e'))
        ]))
        return table

    def _bullets(self, story, items, style_name='ListItem'):
        for item in items:
            story.append(Paragraph(f"<bullet>•</bullet> {escape(item)}", self.styles[style_name]))

    def _analysis_for(self, result: InterviewResult, question: str) -> Optional[AnswerAnalysis]:
        for analysis in result.detailed_analysis:
            if analysis.question == question:
                return analysis
        return None

    def _question_section(self, story, result: InterviewResult):
        story.append(Paragraph("Question Analysis", self.styles['SectionHeader']))

        for i, question in enumerate(result.questions):
            question_type = result.types[i] if i < len(result.types) else ""
            story.append(Paragraph(
                f"<b>Q{i + 1}.</b> [{escape(question_type)}] {escape(question)}",
                self.styles['QuestionHeader']
            ))

            answer = result.answers[i] if i < len(result.answers) else ""
            if question_type == "coding" and i < len(result.code_answers):
                answer = result.code_answers[i] or answer
            answer = answer.strip() or "No answer provided"
            if len(answer) > MAX_ANSWER_CHARS:
                answer = answer[:MAX_ANSWER_CHARS] + "..."
            story.append(Paragraph(f"<i>Answer:</i> {escape(answer)}", self.styles['ListItem']))

            analysis = self._analysis_for(result, question)
            if analysis is None:
                story.append(Paragraph("Score: N/A", self.styles['ListItem']))
                continue

            clarity = analysis.metrics.clarity
            if analysis.coding_language:
                story.append(Paragraph(
                    f"Language: {escape(analysis.coding_language)}", self.styles['ListItem']
                ))
            story.append(Paragraph(
                f"Score: <b>{clarity}%</b> (structure {analysis.metrics.structure}, "
                f"depth {analysis.metrics.depth}, relevance {analysis.metrics.relevance})",
                self.styles['ListItem']
            ))
            self._bullets(story, [f"Strength: {s}" for s in analysis.strengths])
            self._bullets(story, [f"Improve: {s}" for s in analysis.improvements])
            story.append(Paragraph(escape(recommendation_for(clarity)), self.styles['ListItem']))

    def _personality_section(self, story, result: InterviewResult, personality: Optional[PersonalityProfile]):
        story.append(Paragraph("Personality Insights", self.styles['SectionHeader']))

        if personality is None:
            traits = ", ".join(result.personality_traits) or "No personality insights available"
            story.append(Paragraph(f"Dominant traits: {escape(traits)}", self.styles['ListItem']))
            return

        story.append(Paragraph(escape(personality.summary), self.styles['Normal']))
        story.append(Spacer(1, 10))

        data = [['Trait', 'Score']] + [[t.name, f'{t.score}%'] for t in personality.traits]
        table = Table(data, colWidths=[3*inch, 1.5*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HexColor('#f5f5f5')),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 1, HexColor('#e0e0e0')),
            ('PADDING', (0, 0), (-1, -1), 6),
        ]))
        story.append(table)

        story.append(Paragraph("Interview Tips", self.styles['SectionHeader']))
        self._bullets(story, personality.interview_tips)

    def generate_report(
        self,
        result: InterviewResult,
        personality: Optional[PersonalityProfile] = None,
        candidate_name: Optional[str] = None
    ) -> bytes:
        """Render an interview result as a PDF document."""
        buffer = io.BytesIO()

        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=letter,
                rightMargin=50,
                leftMargin=50,
                topMargin=50,
                bottomMargin=50
            )

            story = [Paragraph("Interview Analysis Report", self.styles['CustomTitle'])]

            details = []
            if candidate_name:
                details.append(f"Name: {escape(candidate_name)}")
            details.append(f"Role: {escape(result.role or 'Interview')}")
            completed = result.completed_at.split('T')[0] if result.completed_at else ''
            details.append(f"Date: {escape(completed)}")
            for line in details:
                story.append(Paragraph(line, self.styles['Normal']))
            story.append(Spacer(1, 15))

            story.append(self._create_score_table(result.overall_score))
            story.append(Spacer(1, 15))

            if result.metrics:
                story.append(Paragraph("Performance Metrics", self.styles['SectionHeader']))
                story.append(self._create_metrics_table(result.metrics))

            self._question_section(story, result)
            self._personality_section(story, result, personality)

            footer_style = ParagraphStyle(
                'Footer',
                parent=self.styles['Normal'],
                fontSize=8,
                textColor=HexColor('#666666'),
                alignment=1
            )
            story.append(Spacer(1, 30))
            story.append(Paragraph(
                f"Generated by AI Interview Coach on {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
                footer_style
            ))

            doc.build(story)
            return buffer.getvalue()

        except Exception as e:
            logger.error(f"Error generating PDF report: {str(e)}", exc_info=True)
            raise
        finally:
            buffer.close()
