from datetime import date
from typing import Optional

import streamlit as st
from pymongo.errors import PyMongoError

from modules.logging_config import setup_logging
from modules.rendering import render_jobs
from modules.reports import export_csv, export_excel, export_label_pdf, export_pdf, history_dataframe
from modules.settings import DEFAULT_SETTINGS, load_settings, save_settings
from modules.storage import get_store
from modules.utils import format_timestamp, parse_iso_date
from rx_barcode import (
    ALL_VISIBLE,
    BarcodeId,
    FieldSet,
    GenerationOrchestrator,
    GenerationResult,
    RecordStore,
    ValidationError,
    toggle,
)


setup_logging()


PANEL_TITLES = {
    BarcodeId.RX: "Rx Code-128",
    BarcodeId.NDC: "NDC Code-128",
    BarcodeId.GS1: "GS1 Data Matrix",
    BarcodeId.BARCODE1: "Barcode 1",
    BarcodeId.BARCODE2: "Barcode 2",
}

TEXT_FIELDS = [
    ("rx", "Rx"),
    ("ndc", "NDC (10 digits)"),
    ("lot_number", "Lot Number (optional)"),
    ("serial_number", "Serial Number (optional)"),
]


def _ensure_session_state():
    if "history" not in st.session_state:
        history = RecordStore(get_store())
        try:
            history.load()
        except PyMongoError as exc:
            st.session_state.flash_error = f"History store unavailable: {exc}"
        st.session_state.history = history
    if "selection" not in st.session_state:
        st.session_state.selection = ALL_VISIBLE
    if "active_fields" not in st.session_state:
        st.session_state.active_fields = None
    if "flash_error" not in st.session_state:
        st.session_state.flash_error = None
    for key, _ in TEXT_FIELDS + [("barcode1", ""), ("barcode2", "")]:
        if f"field_{key}" not in st.session_state:
            st.session_state[f"field_{key}"] = ""
    if "field_expiration_date" not in st.session_state:
        st.session_state.field_expiration_date = None


def _orchestrator() -> GenerationOrchestrator:
    return GenerationOrchestrator(st.session_state.history)


def _form_fields() -> FieldSet:
    expiry: Optional[date] = st.session_state.field_expiration_date
    return FieldSet(
        rx=st.session_state.field_rx,
        ndc=st.session_state.field_ndc,
        lot_number=st.session_state.field_lot_number,
        serial_number=st.session_state.field_serial_number,
        expiration_date=expiry.isoformat() if expiry else "",
        barcode1=st.session_state.field_barcode1,
        barcode2=st.session_state.field_barcode2,
    )


def _on_generate():
    fields = _form_fields()
    try:
        _orchestrator().generate(fields, st.session_state.selection)
    except ValidationError as exc:
        st.session_state.flash_error = str(exc)
        return
    except (PyMongoError, OSError) as exc:
        st.session_state.flash_error = f"Could not save history: {exc}"
        return
    st.session_state.active_fields = fields


def _on_recall(index: int):
    records = st.session_state.history.records
    if index >= len(records):
        return
    record = records[index]
    fields = record.fields
    st.session_state.field_rx = fields.rx
    st.session_state.field_ndc = fields.ndc
    st.session_state.field_lot_number = fields.lot_number
    st.session_state.field_serial_number = fields.serial_number
    st.session_state.field_expiration_date = parse_iso_date(fields.expiration_date)
    st.session_state.field_barcode1 = fields.barcode1
    st.session_state.field_barcode2 = fields.barcode2
    try:
        _orchestrator().recall(record, st.session_state.selection)
    except ValidationError:
        # Incomplete entry: fill the form, keep the current display
        return
    st.session_state.active_fields = fields


def _on_toggle(barcode_id: str):
    st.session_state.selection = toggle(st.session_state.selection, barcode_id)


def _apply_display_mode(settings: dict) -> None:
    if settings.get("display_mode") != "Dark":
        return
    st.markdown(
        """
        <style>
        :root, body, [data-testid="stAppViewContainer"] {
            background-color: #0f1115 !important;
            color: #e6e6e6 !important;
        }
        [data-testid="stSidebar"] {
            background-color: #141821 !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _input_form():
    for key, label in TEXT_FIELDS:
        st.text_input(label, key=f"field_{key}")
    st.date_input("Expiration Date (optional)", key="field_expiration_date", format="YYYY-MM-DD")
    st.divider()
    st.text_input("Barcode 1", key="field_barcode1")
    st.text_input("Barcode 2", key="field_barcode2")
    st.button("Generate", type="primary", on_click=_on_generate)


def _render_panels(result: GenerationResult, settings: dict):
    images = render_jobs(
        result.linear_jobs,
        module_height=float(settings["barcode_module_height"]),
        show_text=bool(settings["show_barcode_text"]),
    )
    focused = st.session_state.selection.focused

    if result.outputs.gtin_is_fallback:
        st.warning("NDC is not a 10-digit code; a placeholder GTIN was used.")

    cols = st.columns(len(result.panel_ids))
    for col, panel_id in zip(cols, result.panel_ids):
        with col.container(border=True):
            st.markdown(f"**{PANEL_TITLES[panel_id]}**")
            st.button(
                "Show all" if focused == panel_id else "Focus",
                key=f"toggle_{panel_id.value}",
                on_click=_on_toggle,
                args=(panel_id.value,),
            )
            if panel_id not in result.visible_ids:
                continue
            if panel_id == BarcodeId.GS1:
                if result.show_gs1:
                    st.image(result.outputs.datamatrix_url, width=int(settings["datamatrix_size_px"]))
                    st.code(result.outputs.gs1_element_string, language=None)
            elif panel_id in images:
                st.image(images[panel_id])
            else:
                st.caption("Barcode could not be rendered.")

    if result.linear_jobs and st.button("Save labels PDF"):
        safe_rx = "".join(ch if ch.isalnum() else "_" for ch in result.fields.rx)
        path = export_label_pdf(result.linear_jobs, f"labels_{safe_rx}.pdf")
        st.success(f"Saved: {path}")


def _history_sidebar():
    st.sidebar.header("Recent")
    records = st.session_state.history.records
    if not records:
        st.sidebar.caption("No saved entries yet.")
        return
    for index, record in enumerate(records):
        st.sidebar.button(
            record.label(),
            key=f"recall_{index}_{record.timestamp}",
            help=format_timestamp(record.timestamp),
            on_click=_on_recall,
            args=(index,),
        )

    st.sidebar.markdown("### Export History")
    df = history_dataframe(records)
    if st.sidebar.button("Export CSV"):
        st.sidebar.success(f"Saved: {export_csv(df, 'history.csv')}")
    if st.sidebar.button("Export Excel"):
        st.sidebar.success(f"Saved: {export_excel(df, 'history.xlsx')}")
    if st.sidebar.button("Export PDF"):
        st.sidebar.success(f"Saved: {export_pdf('Barcode History', df, 'history.pdf')}")


def _generator_page(settings: dict):
    st.title("Barcode Generator")
    if st.session_state.flash_error:
        st.error(st.session_state.flash_error)
        st.session_state.flash_error = None

    _input_form()

    fields = st.session_state.active_fields
    if fields is not None:
        result = _orchestrator().view(fields, st.session_state.selection)
        _render_panels(result, settings)

    _history_sidebar()


def _settings_page():
    st.header("Settings")
    settings = load_settings()
    with st.form("settings_form"):
        show_text = st.checkbox("Print text under Code-128 barcodes", value=bool(settings["show_barcode_text"]))
        module_height = st.number_input(
            "Code-128 bar height (mm)",
            min_value=5.0,
            max_value=50.0,
            step=1.0,
            value=float(settings["barcode_module_height"]),
        )
        datamatrix_size = st.number_input(
            "Data Matrix size (px)",
            min_value=80,
            max_value=600,
            step=10,
            value=int(settings["datamatrix_size_px"]),
        )
        display_mode = st.selectbox("Display mode", ["Light", "Dark"], index=0 if settings["display_mode"] == "Light" else 1)
        saved = st.form_submit_button("Save Settings")

    if saved:
        save_settings(
            {
                "show_barcode_text": show_text,
                "barcode_module_height": module_height,
                "datamatrix_size_px": datamatrix_size,
                "display_mode": display_mode,
            }
        )
        st.success("Settings saved.")
    if st.button("Reset to defaults"):
        save_settings(dict(DEFAULT_SETTINGS))
        st.success("Settings reset.")


def main():
    _ensure_session_state()
    settings = load_settings()
    _apply_display_mode(settings)

    page = st.sidebar.radio("Go to", ["Generator", "Settings"])
    if page == "Generator":
        _generator_page(settings)
    else:
        _settings_page()


st.set_page_config(page_title="Rx Barcode Generator", layout="wide")

if __name__ == "__main__":
    main()
