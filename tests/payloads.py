"""
Completion payloads shared by the test modules.
"""

import json


def _recipe(step: str) -> dict:
    return {
        "ingredienti": [
            {"nome": "Farina", "quantita": 200, "unita": "g"},
            {"nome": "Uova", "quantita": "2"},
        ],
        "tempo_preparazione": 20,
        "tempo_cottura": 15,
        "difficolta": "Media",
        "procedimento": [step, "Servire caldo"],
        "consigli": None,
    }


def _dish(name: str) -> dict:
    return {
        "nome": name,
        "descrizione": f"{name} della casa",
        "porzioni": 4,
        "ricetta": _recipe(f"Preparare {name.lower()}"),
    }


MENU_PAYLOAD = {
    "menu": {
        "antipasti": [_dish("Bruschette al pomodoro"), _dish("Carpaccio di manzo")],
        "primi": [_dish("Risotto ai funghi")],
        "secondi": [_dish("Brasato al Barolo")],
        "contorni": [],
        "dolci": [_dish("Panna cotta")],
    },
    "abbinamenti": [
        {
            "portata": "antipasti",
            "vino": {
                "nome": "Franciacorta Cuvée Prestige",
                "produttore": "Ca' del Bosco",
                "annata": None,
                "provenienza": "cantina",
                "quantita_necessaria": 1,
                "motivazione": "Le bollicine puliscono il palato",
            },
        },
        {
            "portata": "primi",
            "vino": {
                "nome": "Barbaresco",
                "produttore": "Gaja",
                "annata": 2019,
                "provenienza": "cantina",
                "quantita_necessaria": 2,
                "motivazione": "Tannini eleganti con i funghi",
                "compatibilita": {
                    "punteggio": 85,
                    "motivazione": "Rosso corposo come piace all'ospite",
                    "punti_forza": ["struttura"],
                    "punti_deboli": [],
                },
            },
        },
        {
            "portata": "secondi",
            "vino": {
                "nome": "Tignanello",
                "produttore": "Antinori",
                "annata": "2018",
                "provenienza": "suggerimento",
                "quantita_necessaria": 1,
                "motivazione": "Regge il brasato",
            },
        },
    ],
    "suggerimenti_acquisto": [
        {
            "vino": "Moscato d'Asti",
            "produttore": "Saracco",
            "annata": "2023",
            "perche": "Dolce e leggero",
            "abbinamento_ideale": "Panna cotta",
        },
        {
            "vino": "Tignanello",
            "produttore": "Antinori",
            "annata": "2018",
            "perche": "Per il secondo",
            "abbinamento_ideale": "Brasato al Barolo",
        },
    ],
    "note_servizio": "Servire i rossi a 18 gradi.",
    "galateo": {
        "inviti": {
            "tempistica": "Una settimana prima",
            "formulazione": "Cari amici...",
            "conferma": "Entro mercoledì",
            "consigli": [],
        },
        "ricevimento": {
            "accoglienza": "Alla porta",
            "aperitivo": "In salotto",
            "passaggio_tavola": "Dopo 30 minuti",
            "congedo": "Con un amaro",
            "consigli": [],
        },
        "tavola": {
            "disposizione": "Alternare gli ospiti",
            "servizio": "Da sinistra",
            "conversazione": "Niente politica",
            "consigli": ["Candele basse"],
        },
    },
}

DISH_PAYLOAD = _dish("Tagliatelle al ragù")

PAIRED_WINE_PAYLOAD = {
    "nome": "Barolo",
    "produttore": "Vietti",
    "annata": "2017",
    "provenienza": "cantina",
    "quantita_necessaria": 2,
    "motivazione": "Più struttura per il risotto",
}

SUGGESTION_PAYLOAD = {
    "vino": "Recioto della Valpolicella",
    "produttore": "Quintarelli",
    "annata": "2015",
    "perche": "Dolce e complesso",
    "abbinamento_ideale": "Panna cotta",
}

PROPOSAL_PAYLOAD = {
    "menu": {
        "courses": [
            {
                "course": "starter",
                "name": "Vitello tonnato",
                "description": "Classico piemontese",
                "prepTime": 40,
                "cellarWine": {"name": "Barbaresco", "reasoning": "Eleganza e tannino fine"},
                "marketWine": {
                    "name": "Roero Arneis",
                    "details": "Bianco, Piemonte, 15-20 euro",
                    "reasoning": "Freschezza",
                },
            },
            {
                "course": "dessert",
                "name": "Bonet",
                "description": "Budino al cacao e amaretti",
                "cellarWine": {"name": "Sauternes", "reasoning": "Dolcezza"},
            },
        ],
        "reasoning": "Menu piemontese estivo",
        "seasonContext": "Estate",
        "totalPrepTime": 150,
    }
}


KITCHEN_NOTE_PAYLOAD = {
    "timeline_cucina": [
        {"quando_minuti": -30, "quando_label": "30 min prima", "descrizione": "Tostare il pane", "piatto_correlato": "Bruschette al pomodoro"},
        {"quando_minuti": -240, "quando_label": "4 ore prima", "descrizione": "Mettere il brasato in marinata", "piatto_correlato": "Brasato al Barolo"},
    ],
    "ricette": [
        {
            "nome": "Brasato al Barolo",
            "categoria": "Secondo",
            "difficolta": "Difficile",
            "tempo_preparazione": 30,
            "tempo_cottura": 180,
            "preparabile_anticipo": True,
            "ingredienti": [{"nome": "Cappello del prete", "quantita": 1.2, "unita": "kg"}],
            "procedimento": ["Marinare la carne", "Cuocere a fuoco lento"],
            "impiattamento": {"descrizione": "Fette con il fondo di cottura", "consigli": ["Piatto caldo"]},
            "consigli": "Meglio il giorno dopo",
        }
    ],
    "lista_spesa": [
        {"categoria": "Carne", "items": [{"nome": "Cappello del prete", "quantita": "1,2 kg"}]}
    ],
    "consigli_chef": ["Preparare il fondo il giorno prima"],
}

WINE_NOTE_PAYLOAD = {
    "timeline_vini": [
        {"quando_minuti": -180, "quando_label": "3 ore prima", "vino": "Franciacorta", "azione": "Mettere in frigo", "icona": "❄️"}
    ],
    "schede_vino": [
        {
            "nome_vino": "Barbaresco 2019",
            "produttore": "Gaja",
            "portata_abbinata": "Primi",
            "temperatura_servizio": "16-18°C",
            "bicchiere_consigliato": "Calice borgogna",
            "quantita_persona": "1 bicchiere (150ml)",
            "decantazione": {"necessaria": True, "tempo": "1 ora", "motivo": "Aprire i profumi"},
            "come_presentare": "Nebbiolo elegante delle Langhe",
        }
    ],
    "sequenza_servizio": [
        {"ordine": 1, "vino": "Franciacorta", "momento": "Con antipasti", "transizione": None}
    ],
    "attrezzatura_necessaria": [{"nome": "Decanter", "icona": "🍷", "quantita": 1}],
    "consigli_sommelier": ["Servire il rosso dopo il bianco"],
}

HOSTING_NOTE_PAYLOAD = {
    "preparazione_ambiente": {
        "tavola": {"descrizione": "Tavola estiva in giardino", "tovaglia": "Lino bianco"},
        "atmosfera": {"illuminazione": "Candele", "musica": "Jazz leggero"},
        "checklist_pre_ospiti": ["Bicchieri lucidati"],
    },
    "accoglienza": {
        "orario_arrivo": "20:00",
        "dove_ricevere": "Giardino",
        "aperitivo": {"cosa": "Franciacorta", "dove": "Terrazza", "durata": "30 minuti"},
        "come_accomodare": "Segnaposto a tavola",
        "rompighiaccio": ["Il viaggio di Marco"],
    },
    "gestione_serata": {
        "tempi_portate": "20 minuti tra le portate",
        "quando_sparecchiare": "Dopo il secondo",
        "consigli_conversazione": ["Vini delle Langhe"],
        "se_qualcosa_va_storto": ["Tenere pronto un antipasto in più"],
    },
    "post_cena": {
        "caffe_te": {"quando": "Dopo il dolce", "come": "Moka in salotto"},
        "digestivo": {"cosa": "Grappa di Barolo", "quando": "Con il caffè"},
        "intrattenimento": None,
        "congedo": {"segnali": "Quando calano i discorsi", "saluti": "Alla porta", "omaggio": None},
    },
    "consigli_host": ["Godersi la serata"],
}


def fenced(payload: dict) -> str:
    """Completion text the way models often answer: prose plus a fenced block."""
    return f"Ecco il menu richiesto:\n```json\n{json.dumps(payload, ensure_ascii=False)}\n```\nBuon appetito!"

