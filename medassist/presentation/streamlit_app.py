import logging
import time

import streamlit as st

from medassist.application.body_map import BodyMap
from medassist.application.extraction import SymptomExtractor, merge_symptoms, remove_symptom
from medassist.application.inference import ConditionInferenceEngine
from medassist.application.risk_assessment import RiskAssessmentEngine, RiskAssessmentSession
from medassist.domain.models import Demographics, RiskBand, Severity
from medassist.infrastructure.config import Settings
from medassist.infrastructure.knowledge.loader import get_default_knowledge_base
from medassist.infrastructure.knowledge.sections import KnowledgeBaseError


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚕️ **DISCLAIMER:** This analysis is for informational purposes only and is NOT a diagnosis. "
    "It should not replace professional medical advice. "
    "Please consult a healthcare provider for proper diagnosis and treatment."
)

SEVERITY_ICONS = {
    Severity.LOW: "🟢",
    Severity.MEDIUM: "🟡",
    Severity.HIGH: "🔴",
}

BAND_ICONS = {
    RiskBand.LOW: "🟢",
    RiskBand.MODERATE: "🟡",
    RiskBand.HIGH: "🔴",
}


def _init_session_state() -> bool:
    if "knowledge_base" not in st.session_state:
        try:
            st.session_state.knowledge_base = get_default_knowledge_base()
        except KnowledgeBaseError as e:
            logger.exception("Knowledge base failed to load: %s", e)
            st.error(f"❌ **Knowledge base could not be loaded**\n\n{e}")
            return False

    kb = st.session_state.knowledge_base
    if "extractor" not in st.session_state:
        st.session_state.extractor = SymptomExtractor.from_knowledge_base(kb)
    if "inference_engine" not in st.session_state:
        st.session_state.inference_engine = ConditionInferenceEngine(kb)
    if "body_map" not in st.session_state:
        st.session_state.body_map = BodyMap.from_knowledge_base(kb)
    if "risk_session" not in st.session_state:
        st.session_state.risk_session = RiskAssessmentSession(RiskAssessmentEngine.from_knowledge_base(kb))
    if "symptoms" not in st.session_state:
        st.session_state.symptoms = []
    if "inference_result" not in st.session_state:
        st.session_state.inference_result = None
    return True


def _pace(settings: Settings, message: str):
    delay = settings.thinking_delay_seconds
    if delay > 0:
        with st.spinner(message):
            time.sleep(delay)


def _add_symptoms(symptoms):
    merged = merge_symptoms(st.session_state.symptoms, symptoms)
    if merged != st.session_state.symptoms:
        st.session_state.symptoms = merged
        # analysis shown must match the current symptom list
        st.session_state.inference_result = None


def _render_sidebar(settings: Settings):
    st.sidebar.title("⚙️ Settings")

    st.sidebar.markdown("### Knowledge Base")
    kb = st.session_state.knowledge_base
    st.sidebar.caption(f"**Version:** {kb.version}")
    if settings.knowledge_url:
        st.sidebar.caption(f"**Source:** {settings.knowledge_url}")
    else:
        st.sidebar.caption(f"**Source:** {settings.knowledge_dir or 'bundled'}")

    st.sidebar.divider()

    if st.sidebar.button("🔄 Clear Symptoms", use_container_width=True):
        st.session_state.symptoms = []
        st.session_state.inference_result = None
        st.rerun()


def _render_symptom_checker(settings: Settings):
    kb = st.session_state.knowledge_base
    extractor: SymptomExtractor = st.session_state.extractor

    text = st.text_area(
        "Describe how you feel",
        placeholder="e.g., My head hurts and it's hard to breathe",
    )
    if st.button("Detect Symptoms") and text:
        found = extractor.extract(text)
        if found:
            _add_symptoms(found)
        else:
            st.info("No known symptoms found in that description.")

    st.markdown("#### Common Symptoms")
    cols = st.columns(3)
    for i, symptom in enumerate(kb.common_symptoms):
        if cols[i % 3].button(symptom.capitalize(), key=f"common_{symptom}", use_container_width=True):
            _add_symptoms([symptom])

    body_map: BodyMap = st.session_state.body_map
    area_names = {area.id: area.name for area in body_map.areas}
    selected_areas = st.multiselect(
        "Where do you feel it?",
        options=list(area_names),
        format_func=lambda area_id: area_names[area_id],
    )
    suggestions = [s for s in body_map.suggest(selected_areas) if s not in st.session_state.symptoms]
    if suggestions:
        picked = st.multiselect("Suggested symptoms", options=suggestions)
        if picked and st.button("Add Selected"):
            _add_symptoms(picked)

    if st.session_state.symptoms:
        st.markdown("#### Your Symptoms")
        for symptom in list(st.session_state.symptoms):
            col1, col2 = st.columns([4, 1])
            col1.markdown(f"- {symptom}")
            if col2.button("Remove", key=f"remove_{symptom}"):
                st.session_state.symptoms = remove_symptom(st.session_state.symptoms, symptom)
                st.session_state.inference_result = None
                st.rerun()

    age = st.number_input("Age (optional)", min_value=0, max_value=120, value=None, step=1)

    if st.button("🔬 Analyze Symptoms", disabled=not st.session_state.symptoms, use_container_width=True):
        _pace(settings, "🔬 Analyzing your symptoms...")
        demographics = Demographics(age=int(age)) if age is not None else None
        engine: ConditionInferenceEngine = st.session_state.inference_engine
        st.session_state.inference_result = engine.predict(st.session_state.symptoms, demographics)

    result = st.session_state.inference_result
    if result is not None:
        st.markdown(format_inference_for_chat(result))
    elif not st.session_state.symptoms:
        st.caption("Add symptoms to get health insights and recommendations.")


def _render_risk_assessment(settings: Settings):
    session: RiskAssessmentSession = st.session_state.risk_session

    if session.is_complete:
        st.markdown(format_assessment_results(session.results))
        if st.button("Retake Assessment", use_container_width=True):
            session.restart()
            st.rerun()
        return

    question = session.current_question
    if question is None:
        st.warning("No questionnaire is configured.")
        return

    st.caption(f"{session.current_index + 1} of {len(session.questions)}")
    st.progress(int(session.progress))
    st.markdown(f"### {question.prompt}")

    values = [opt.value for opt in question.options]
    labels = {opt.value: opt.label for opt in question.options}
    current = session.answers.get(question.id)
    index = values.index(current) if current in values else None

    if question.input_type == "select":
        choice = st.selectbox(
            "Select an option",
            options=values,
            index=index,
            format_func=lambda v: labels[v],
            key=f"q_{question.id}",
            placeholder="Select an option...",
        )
    else:
        choice = st.radio(
            "Choose one",
            options=values,
            index=index,
            format_func=lambda v: labels[v],
            key=f"q_{question.id}",
        )
    if choice is not None and choice != current:
        session.answer(question.id, choice)

    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button("Previous", disabled=not session.can_go_back, use_container_width=True):
            session.previous()
            st.rerun()
    with col2:
        label = "Complete Assessment" if session.is_last_question else "Next"
        if st.button(label, disabled=not session.can_advance, use_container_width=True):
            if session.is_last_question:
                _pace(settings, "📊 Calculating your risk profile...")
            session.next()
            st.rerun()


def main():
    settings = Settings()
    logging.basicConfig(level=settings.log_level)

    st.set_page_config(
        page_title="Symptom & Risk Checker",
        page_icon="⚕️",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    if not _init_session_state():
        st.stop()

    _render_sidebar(settings)

    st.markdown("# 🏥 Symptom & Risk Checker")
    st.info(DISCLAIMER)

    checker_tab, risk_tab = st.tabs(["🩺 Symptom Checker", "🛡️ Health Risk Assessment"])
    with checker_tab:
        _render_symptom_checker(settings)
    with risk_tab:
        _render_risk_assessment(settings)


def format_inference_for_chat(result) -> str:
    """Format an inference result as Markdown, always ending with the disclaimer."""
    lines = ["# 🧠 Health Analysis\n"]

    if not result.predictions:
        lines.append("No matching conditions yet. Add or describe more symptoms to get insights.\n")
    else:
        risk_icon = BAND_ICONS[result.risk_level]
        lines.append(f"**Symptoms analyzed:** {len(result.symptoms_analyzed)}")
        lines.append(f"**Possible conditions:** {len(result.predictions)}")
        lines.append(f"**Risk assessment:** {risk_icon} {round(result.risk_score)}%\n")

        lines.append("## 🏥 Possible Conditions (NOT a diagnosis)")
        for prediction in result.predictions:
            icon = SEVERITY_ICONS[prediction.severity]
            lines.append(
                f"**{icon} {prediction.condition_name}** "
                f"({prediction.severity.value} risk, probability match {round(prediction.probability * 100)}%)"
            )
            lines.append(f"_{prediction.description}_")
            for rec in prediction.recommendations:
                lines.append(f"- {rec}")
            lines.append("")

    lines.append("---")
    lines.append(DISCLAIMER)
    return "\n".join(lines)


def format_assessment_results(assessments) -> str:
    """Format questionnaire results as Markdown, always ending with the disclaimer."""
    lines = ["# 🛡️ Your Health Risk Assessment\n"]

    if not assessments:
        lines.append("No questions were answered.\n")

    for assessment in assessments:
        icon = BAND_ICONS[assessment.risk_band]
        lines.append(f"## {assessment.display_name} Risk: {icon} {assessment.risk_band.value.upper()}")
        lines.append(f"**Risk score:** {assessment.score} / {assessment.max_score}")
        lines.append("**Recommendations:**")
        for rec in assessment.recommendations:
            lines.append(f"- {rec}")
        lines.append("")

    lines.append("---")
    lines.append(DISCLAIMER)
    return "\n".join(lines)


if __name__ == "__main__":
    main()
