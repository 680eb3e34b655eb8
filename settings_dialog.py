"""Settings form for provider, keys, language and audio input."""

from __future__ import annotations

from typing import Optional

from config import LANGUAGES, MODELS_BY_PROVIDER
from models import AppConfig, InterviewType, Provider
from recorder import list_input_devices

try:
    from PySide6.QtWidgets import (
        QComboBox,
        QDialog,
        QDialogButtonBox,
        QFormLayout,
        QLineEdit,
    )
except Exception:  # pragma: no cover
    QDialog = object  # type: ignore


def _select(combo: "QComboBox", value: str) -> None:
    index = combo.findData(value)
    if index < 0:
        index = combo.findText(value)
    if index >= 0:
        combo.setCurrentIndex(index)


class SettingsDialog(QDialog):
    def __init__(self, initial: Optional[AppConfig] = None, parent=None) -> None:  # noqa: ANN001
        super().__init__(parent)
        self.setWindowTitle("Settings")
        config = initial or AppConfig()

        self._provider = QComboBox()
        self._provider.addItem("OpenAI", Provider.OPENAI.value)
        self._provider.addItem("Gemini", Provider.GEMINI.value)

        self._openai_key = QLineEdit(config.openai_api_key)
        self._openai_key.setEchoMode(QLineEdit.Password)
        self._gemini_key = QLineEdit(config.gemini_api_key)
        self._gemini_key.setEchoMode(QLineEdit.Password)

        self._language = QComboBox()
        self._language.addItems(list(LANGUAGES))
        self._language.setEditable(True)

        self._model = QComboBox()

        self._device = QComboBox()
        for device_id, label in list_input_devices():
            self._device.addItem(label, device_id)

        self._interview_type = QComboBox()
        for interview_type in InterviewType:
            self._interview_type.addItem(interview_type.value.replace("-", " ").title(), interview_type.value)

        _select(self._provider, config.provider)
        self._refresh_models()
        _select(self._model, config.model)
        self._language.setCurrentText(config.language or LANGUAGES[0])
        _select(self._device, config.audio_device_id)
        _select(self._interview_type, config.interview_type)
        self._provider.currentIndexChanged.connect(self._refresh_models)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        form = QFormLayout()
        form.addRow("AI provider", self._provider)
        form.addRow("OpenAI API key", self._openai_key)
        form.addRow("Gemini API key", self._gemini_key)
        form.addRow("Language", self._language)
        form.addRow("Model", self._model)
        form.addRow("Audio input", self._device)
        form.addRow("Interview type", self._interview_type)
        form.addRow(buttons)
        self.setLayout(form)

    def _refresh_models(self) -> None:
        current = self._model.currentText()
        models = MODELS_BY_PROVIDER[self._provider.currentData()]
        self._model.clear()
        self._model.addItems(list(models))
        if current in models:
            self._model.setCurrentText(current)

    def config(self) -> AppConfig:
        return AppConfig(
            provider=self._provider.currentData(),
            openai_api_key=self._openai_key.text().strip(),
            gemini_api_key=self._gemini_key.text().strip(),
            language=self._language.currentText().strip(),
            model=self._model.currentText(),
            audio_device_id=self._device.currentData() or "default",
            interview_type=self._interview_type.currentData(),
        )
