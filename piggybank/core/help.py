HELP_TEXT = (
    "📘 *Comandos disponíveis:*\n"
    "➕ `+valor descrição` → registrar entrada\n"
    "➖ `-valor descrição` → registrar saída\n"
    "📊 `status [dias]` → ver resumo financeiro\n"
    "❓ `help` → ver esta mensagem"
)


def help_text() -> str:
    return HELP_TEXT
