"""
HLF Proximity, renders Half Magic proxies of split and adventure cards
through Proximity from the Scryfall catalog
"""
