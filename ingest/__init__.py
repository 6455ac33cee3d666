"""
Ingest pipeline per file inventario (rebanho/estoque).

Questo modulo contiene:
- header_aliases: slug e risoluzione alias header
- normalization: parsing numerico locale e normalizzazione riga
- csv_parser: parsing CSV (pandas)
- pipeline: ingest batch e orchestrazione
- aggregation: totali per unità, distribuzioni per categoria/prodotto
- palette: colori per grafici
"""
